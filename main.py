from pathlib import Path
import sys

# Allow running without installing the package.
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from cli import main


if __name__ == "__main__":
    sys.exit(main())
