"""
Unit tests for model response parsing.
"""
from unitforge.generation.response_parser import extract_code


def test_single_fenced_block():
    response = "Here you go:\n```javascript\ntest('a', () => {});\n```\nHope it helps."
    assert extract_code(response) == "test('a', () => {});"


def test_multiple_blocks_are_joined():
    response = "```ts\nimport { a } from './a';\n```\ntext\n```typescript\ntest('a', () => {});\n```"
    assert extract_code(response) == "import { a } from './a';\n\ntest('a', () => {});"


def test_block_without_language_tag():
    assert extract_code("```\nconst x = 1;\n```") == "const x = 1;"


def test_no_fences_strips_prose_lines():
    response = "# Tests\n> note\nExplanation: these cover add\ntest('a', () => {});\n"
    assert extract_code(response) == "test('a', () => {});"


def test_empty_inputs():
    assert extract_code("") == ""
    assert extract_code(None) == ""
    assert extract_code("```js\n\n```") == ""
