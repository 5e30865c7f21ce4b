"""Allow ``python -m prtscan``"""

from . import main

if __name__ == "__main__":
    main()
