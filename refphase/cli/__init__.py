#!/usr/bin/env python

import fire
from ._utils import log_params
from ._phase import phase, panel_stats


def cli():
    """
    Entry point for the refphase command line interface.
    """
    fire.Fire()


if __name__ == "__main__":
    fire.Fire()
