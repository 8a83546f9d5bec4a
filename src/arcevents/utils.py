import os
from pathlib import Path

MODULE_ROOT = Path(os.path.realpath(__file__)).parent
NAME = MODULE_ROOT.name.lower()
ENTRY_POINTS = [NAME]

def _get_version() -> str:
    with open(MODULE_ROOT.joinpath("version.txt")) as v:
        return v.readline().strip()
VERSION = _get_version()
