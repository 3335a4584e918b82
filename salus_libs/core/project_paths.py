from pathlib import Path


def get_project_root() -> Path:
    """
    Locate the project root independently of the working directory.

    Rules:
    - walk upwards from this file
    - the first directory holding both `pyproject.toml` and `salus/` wins
    - otherwise fall back to the parent of `salus_libs`
    """
    here = Path(__file__).resolve()
    for parent in [here] + list(here.parents):
        if (parent / "pyproject.toml").exists() and (parent / "salus").exists():
            return parent
    # .../salus_libs/core/project_paths.py -> .../salus_libs -> .../<root>
    return here.parents[2]
