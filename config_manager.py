"""JSON configuration for the N-Queens search experiments.

``config.json`` holds three sections, each optional:

- ``experiment_settings``: ``N_values`` (hill-climbing sizes), ``bf_N_values``
  (brute-force sizes), ``runs_hc_final``, ``hc_max_restarts``, ``seed``,
  ``output_dir`` and ``run_tag`` (label added to output filenames).
- ``timeout_settings``: ``hc_time_limit`` (seconds per hill-climbing run) and
  ``experiment_timeout`` (seconds per experiment bundle).
- ``parallel_settings``: ``workers``.

Only the presence of the file and of the sections is handled here; value
conversion happens in ``nqsearch.analysis.cli.apply_configuration``.
"""
import json
from pathlib import Path

EXPERIMENT_SECTION = "experiment_settings"
TIMEOUT_SECTION = "timeout_settings"
PARALLEL_SECTION = "parallel_settings"


class ConfigManager:
    """Read and update a JSON configuration file.

    Parameters
    ----------
    config_path : str | os.PathLike, default "config.json"
        File to load. It must exist; a missing file raises ``FileNotFoundError``.
    """

    def __init__(self, config_path="config.json"):
        self.config_path = Path(config_path)
        self.config = self.load_config()

    def load_config(self):
        """Parse the configuration file and return its root object."""
        if not self.config_path.is_file():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}\n"
                f"Copy config.json from the project root or pass --config"
            )
        with open(self.config_path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.config_path}: top-level JSON value must be an object")
        return data

    def save_config(self):
        with open(self.config_path, "w") as f:
            json.dump(self.config, f, indent=2)

    def get_section(self, section):
        """Return ``section`` as a dict, or an empty dict when it is absent."""
        value = self.config.get(section, {})
        if not isinstance(value, dict):
            raise ValueError(f"{self.config_path}: section '{section}' must be an object")
        return value

    def get_experiment_settings(self):
        return self.get_section(EXPERIMENT_SECTION)

    def get_timeout_settings(self):
        return self.get_section(TIMEOUT_SECTION)

    def get_parallel_settings(self):
        """Worker-pool settings, e.g. ``{"workers": 4}``."""
        return self.get_section(PARALLEL_SECTION)

    def update_setting(self, section, key, value):
        """Set ``section.key`` to ``value`` and write the file back."""
        self.config.setdefault(section, {})[key] = value
        self.save_config()
