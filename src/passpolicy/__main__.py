"""Entry point for 'python -m passpolicy' command."""

from passpolicy.cli import main

if __name__ == "__main__":
    main()
