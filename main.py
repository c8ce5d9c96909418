#!/usr/bin/env python3
"""
screen-ocr
Prints the text recognized in an image, grouped into blocks, with menu bars,
code syntax and breadcrumbs filtered out.
"""

from screenocr.cli import main

if __name__ == "__main__":
    main()
