"""Entry point for running the relay as module: python -m swaprelay"""

from swaprelay.main import main

if __name__ == "__main__":
    main()
