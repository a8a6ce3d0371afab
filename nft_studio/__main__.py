# __main__.py
import sys

from nft_studio.gui import main

if __name__ == "__main__":
    sys.exit(main())
