#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Render personalized certificate PDFs over a template image.
"""

# local repo modules
import certificate_compositor.cli


if __name__ == "__main__":
	certificate_compositor.cli.main()
