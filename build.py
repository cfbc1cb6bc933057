#!/usr/bin/env python3
from plainsite.cli import main

if __name__ == "__main__":
    main()
