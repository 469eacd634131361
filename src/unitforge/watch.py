"""
Watch mode for UnitForge - regenerate tests when sources change.
"""
import time
from pathlib import Path
from datetime import datetime
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler, FileSystemEvent

from unitforge.core.discovery import SOURCE_EXTENSIONS, is_source_file
from unitforge.support.config import UnitForgeConfig


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(self, callback, debounce_seconds: float = 0.5):
        """
        Initialize handler.

        Args:
            callback: Function to call when a file changes (receives file path)
            debounce_seconds: Minimum time between processing events for the same file
        """
        super().__init__()
        self.callback = callback
        self.debounce_seconds = debounce_seconds
        self.last_processed = {}

    def on_modified(self, event: FileSystemEvent):
        if event.is_directory:
            return
        if not str(event.src_path).lower().endswith(SOURCE_EXTENSIONS):
            return
        self._process_event(str(event.src_path))

    def on_created(self, event: FileSystemEvent):
        if event.is_directory:
            return
        if not str(event.src_path).lower().endswith(SOURCE_EXTENSIONS):
            return
        self._process_event(str(event.src_path))

    def _process_event(self, file_path: str):
        now = time.time()
        last_time = self.last_processed.get(file_path, 0)

        if now - last_time < self.debounce_seconds:
            return

        self.last_processed[file_path] = now
        self.callback(Path(file_path))


def watch_project(project_root: Path, config: UnitForgeConfig, process_file_func):
    """
    Watch project for source changes and regenerate tests.

    Args:
        project_root: Project root directory
        config: UnitForge configuration
        process_file_func: Function to call to process a changed file
    """
    output_dir_name = Path(config.output_dir).parts[0] if config.output_dir else None

    def on_file_change(file_path: Path):
        timestamp = datetime.now().strftime("%H:%M:%S")

        try:
            rel_path = file_path.relative_to(project_root)
        except ValueError:
            return

        if not is_source_file(file_path, project_root, config):
            return

        # Generated tests are written here
        if output_dir_name and rel_path.parts[0] == output_dir_name:
            return

        print(f"[{timestamp}] Detected change: {rel_path} -> regenerating...")

        try:
            process_file_func(file_path)
            print(f"[{timestamp}] ✓ Tests updated for {rel_path}")
        except Exception as e:
            print(f"[{timestamp}] ✗ Error processing {rel_path}: {e}")

    handler = DebounceHandler(on_file_change, debounce_seconds=0.5)
    observer = Observer()
    observer.schedule(handler, str(project_root), recursive=True)

    print(f"Watching {project_root} for changes...")
    print("Press Ctrl+C to stop watching.")
    print()

    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\n\nStopping watch mode...")
        observer.stop()

    observer.join()
    print("Watch mode stopped.")
