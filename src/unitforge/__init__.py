"""UnitForge: AI-assisted unit test generation for JavaScript and TypeScript."""

__version__ = "0.1.0"
