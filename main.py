# Main.py
""""" Launcher for the infix calculator.

   Responsibilities:
   - Detect run mode (script vs PyInstaller .exe)
   - Verify required files exist in development mode
   - Hand the command line over to the CLI

"""""
import sys
from pathlib import Path

from culator import CLI


# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent



def check_files_exist():

    """
      Fail fast in development if engine files or the default settings are
      missing / moved / renamed.
    """

    package_dir = PROJECT_ROOT / "culator"

    REQUIRED = [
        package_dir / "MathEngine.py",
        package_dir / "ScientificEngine.py",
        package_dir / "config_manager.py",
        package_dir / "config.json",
    ]

    missing_files = [file_path.name for file_path in REQUIRED if not file_path.exists()]

    if missing_files:
        print("Error: The following files are missing or in the wrong location:", file=sys.stderr)
        for file_name in missing_files:
            print(f"- {file_name}", file=sys.stderr)
        sys.exit(1)


def main():
    # Keep this thin: no business logic here.
    return CLI.main()


if __name__ == "__main__":
    if not getattr(sys, 'frozen', False):
        check_files_exist()
    sys.exit(main())
