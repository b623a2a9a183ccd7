"""Simulation logging with Parquet output.

The `Logger` stores a session folder per simulation object and a run folder
per reset cycle. Element snapshots, failures and ignitions are cached during
the run, flushed as parquet part files, and merged into one file per stream
when the run finishes. Human readable messages and the run summary are kept
in ``status_log.json``.

.. autoclass:: Logger
    :members:
"""
import os
from typing import TYPE_CHECKING
from fresim.utilities.logger_schemas import ElementLogEntry, FailureEntry, IgnitionEntry
from fresim.utilities.parquet_writer import ParquetWriter
from fresim.utilities.data_classes import SimParams
from fresim.utilities.fire_util import MaterialCategory, StructuralRole
from fresim.utilities.unit_conversions import s_to_hr
import pyarrow as pa
import pyarrow.parquet as pq
import datetime
import numpy as np
import json
import pandas as pd
import glob
import shutil

if TYPE_CHECKING:
    from fresim.fire_simulator.fire_sim import FireResistanceSim


class Logger:
    def __init__(self, log_folder: str):

        self.log_ctr = 0

        self.log_folder = log_folder
        os.makedirs(self.log_folder, exist_ok=True)

        self._session_folder = self.generate_session_folder()
        os.makedirs(self._session_folder, exist_ok=True)
        self._run_folder = None

        self._element_cache = []
        self._failure_cache = []
        self._ignition_cache = []

        self._status_log = {
            "sim_start": datetime.datetime.now().isoformat(),
            "messages": [],
            "latest_flush": None,
            "results": None
        }

        self.start_new_run()

    @property
    def session_folder(self) -> str:
        return self._session_folder

    @property
    def run_folder(self) -> str:
        return self._run_folder

    @property
    def messages(self) -> list:
        return self._status_log["messages"]

    def cache_element_updates(self, entries):
        self._element_cache.extend(entries)

    def cache_failure(self, entry: FailureEntry):
        self._failure_cache.append(entry)

    def cache_ignitions(self, entries):
        self._ignition_cache.extend(entries)

    def flush(self):
        self.element_writer.write_batch(self._element_cache)
        self._element_cache.clear()

        self.failure_writer.write_batch(self._failure_cache)
        self._failure_cache.clear()

        self.ignition_writer.write_batch(self._ignition_cache)
        self._ignition_cache.clear()

        self._status_log["latest_flush"] = datetime.datetime.now().isoformat()
        self._write_status_log()

    def write_results(self, sim: 'FireResistanceSim', on_interrupt: bool = False):
        if sim is not None:
            elements = list(sim.elements.values())
            failed = [e for e in elements if e.failed]
            exposed = [e for e in elements if e.exposed]
            unrated = [e for e in elements if e.achieved_rating_hr <= 0]

            self._status_log["results"] = {
                "user interrupted": on_interrupt,
                "sim time (s)": sim.clock.sim_time_s,
                "sim time": sim.clock.format_time(sim.clock.sim_time_s),
                "sim time (hr)": s_to_hr(sim.clock.sim_time_s),
                "elements": len(elements),
                "elements exposed": len(exposed),
                "elements failed": len(failed),
                "elements without rating": len(unrated),
                "all failed": len(elements) > 0 and len(failed) == len(elements)
            }

            if failed:
                self._status_log["results"]["failure order"] = [
                    e.id for e in sorted(failed, key=lambda e: sim.trackers[e.id].failed_at_s)
                ]

    def finish(self, sim: 'FireResistanceSim', on_interrupt: bool = False):
        self.write_results(sim, on_interrupt)
        self.flush()

        streams = {
            "element_logs": os.path.join(self._run_folder, "element_logs"),
            "failure_logs": os.path.join(self._run_folder, "failure_logs"),
            "ignition_logs": os.path.join(self._run_folder, "ignition_logs"),
        }

        for stream, folder in streams.items():
            self._merge_parquet_files(folder, os.path.join(self._run_folder, f"{stream}.parquet"))

            # Delete the temporary folders after merging
            if os.path.exists(folder):
                shutil.rmtree(folder)

    def _merge_parquet_files(self, folder_path: str, output_file: str):

        parquet_files = sorted(glob.glob(os.path.join(folder_path, "part-*.parquet")))

        if not parquet_files:
            print(f"No parquet files found in {folder_path}")
            return

        dfs = [pd.read_parquet(f) for f in parquet_files]
        combined_df = pd.concat(dfs, ignore_index=True)

        table = pa.Table.from_pandas(combined_df, preserve_index=False)
        pq.write_table(table, output_file, compression='snappy')

    def generate_session_folder(self) -> str:
        """Generates the path for the current sim's log files based on current datetime

        :return: Session folder path string
        :rtype: str
        """
        date_time_str = datetime.datetime.now().strftime('%d-%b-%Y-%H-%M-%S-%f')
        return os.path.join(self.log_folder, f"log_{date_time_str}")

    def start_new_run(self):
        """Open a new run folder; called at construction and after every simulation reset."""
        self._run_folder = os.path.join(self._session_folder, f"run_{self.log_ctr}")
        os.makedirs(self._run_folder, exist_ok=True)

        self.element_writer = ParquetWriter(
            os.path.join(self._run_folder, "element_logs"), schema=ElementLogEntry
        )

        self.failure_writer = ParquetWriter(
            os.path.join(self._run_folder, "failure_logs"), schema=FailureEntry
        )

        self.ignition_writer = ParquetWriter(
            os.path.join(self._run_folder, "ignition_logs"), schema=IgnitionEntry
        )

        self._element_cache.clear()
        self._failure_cache.clear()
        self._ignition_cache.clear()
        self._status_log["messages"] = []
        self._status_log["results"] = None

        self.log_ctr += 1

    def log_metadata(self, sim_params: SimParams, sim: 'FireResistanceSim'):
        clock = sim_params.clock
        spread = sim_params.spread

        elements = list(sim.elements.values())

        metadata = {
            "inputs": {
                "config file": sim_params.config_path,
                "default time scale": clock.default_time_scale,
                "time scale bounds": (clock.min_time_scale, clock.max_time_scale),
                "log interval (s)": sim_params.log_interval_s
            },

            "spread": {
                "enabled": spread.enabled,
                "radius (m)": spread.spread_radius_m,
                "threshold (s)": spread.spread_threshold_s,
                "scan interval (s)": spread.scan_interval_s,
                "seed": spread.seed
            },

            "fire sources": [
                {
                    "name": source.name,
                    "position": source.position,
                    "radius (m)": source.radius_m,
                    "max radius (m)": source.max_radius_m,
                    "growth rate (m/min)": source.growth_rate_m_per_min,
                    "auto grow": source.auto_grow,
                    "check interval (s)": source.check_interval_s
                }
                for source in sim_params.fire_sources
            ],

            "elements": [
                {
                    "id": e.id,
                    "name": e.name,
                    "role": StructuralRole.names[e.role],
                    "material": None if e.material is None else MaterialCategory.names[e.material],
                    "rating (hr)": e.achieved_rating_hr,
                    "position": e.position
                }
                for e in elements
            ]
        }

        safe_dict = make_json_serializable(metadata)

        metadata_path = os.path.join(self._session_folder, "metadata.json")
        with open(metadata_path, 'w') as f:
            json.dump(safe_dict, f, indent=2)

    def log_message(self, message: str):
        timestamp = datetime.datetime.now().isoformat()
        entry = f"[{timestamp}]: {message}"
        self._status_log["messages"].append(entry)

    def _write_status_log(self):
        status_path = os.path.join(self._run_folder, "status_log.json")
        with open(status_path, 'w') as f:
            json.dump(make_json_serializable(self._status_log), f, indent = 2)

def make_json_serializable(obj):
    if isinstance(obj, dict):
        return {k: make_json_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [make_json_serializable(item) for item in obj]
    elif isinstance(obj, tuple):
        return tuple(make_json_serializable(item) for item in obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.generic):
        return obj.item()
    elif isinstance(obj, datetime.datetime):
        return obj.isoformat()
    elif isinstance(obj, datetime.date):
        return obj.isoformat()
    elif hasattr(obj, '__dict__'):
        return str(obj)
    else:
        return obj
