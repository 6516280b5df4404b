#!/usr/bin/env python3
from postgen.cli import main


if __name__ == "__main__":
    main()
