from pathlib import Path

import yaml


def load_from_yaml(path: Path):
    """Load YAML file and return parsed content."""
    with open(path) as f:
        return yaml.safe_load(f)


def find_config_file(config_dir: Path) -> Path | None:
    for name in ("config.yml", "config.yaml"):
        p = Path(config_dir) / name
        if p.exists():
            return p
    return None
