#!/usr/bin/env python

from mdlyricgetter.cli import cli

if __name__ == '__main__':
    cli()
