"""
CLI Entry Point: levy-share-ui

Launches the Streamlit UI.
"""

import sys
from pathlib import Path

from streamlit.web import cli as stcli


def app_path() -> Path:
    # levy_share/cli/ui.py -> levy_share/ui/app.py
    return Path(__file__).resolve().parent.parent / "ui" / "app.py"


def main() -> None:
    path = app_path()
    if not path.exists():
        print(f"Error: Could not find UI entry point at {path}", file=sys.stderr)
        sys.exit(1)

    # Extra arguments are passed through to `streamlit run`.
    sys.argv = ["streamlit", "run", str(path)] + sys.argv[1:]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
