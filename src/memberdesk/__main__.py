"""Entry point for 'python -m memberdesk'."""

from memberdesk.cli import main

if __name__ == "__main__":
    main()
