#!/usr/bin/env python3
"""
Launcher para Lyric Scroll
Este archivo es el punto de entrada de la demo de consola
"""

import sys
from lyric_scroll.main import main

if __name__ == "__main__":
    sys.exit(main())
