# -*- coding: utf-8 -*-

"""
Main entry point for launching spotty from a source checkout.

    python run.py source.dxp ./output
"""

import sys

from spotty.cli import main

if __name__ == '__main__':
    sys.exit(main())
