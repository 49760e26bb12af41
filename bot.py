#!/usr/bin/env python3
"""Run the movie search bot (same as ``python -m movie_search.main``)."""

from movie_search.main import run

if __name__ == "__main__":
    run()
