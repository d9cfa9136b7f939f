"""
Deployment Record Store.

A human-readable JSON file keyed by network name:

    {
      "testnet": {
        "contracts": {"baseAsset": "0x..", ...},
        "runs": [{"operation": ..., "success": ..., ...}],
        "updatedAt": "2026-01-15T10:30:00Z"
      }
    }

The record is advisory. On-chain state always wins, and any read or
write problem is logged and ignored so a run never fails because of it.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

from core.application.interfaces import IDeploymentRecordStore
from polytrade_sdk.utils.datetime import isoformat_z, utc_now

logger = logging.getLogger(__name__)

MAX_RUNS_PER_NETWORK = 50


class DeploymentRecordStore(IDeploymentRecordStore):
    """Read-merge-write JSON record, replaced atomically on every write."""

    def __init__(self, path: Union[str, Path], max_runs: int = MAX_RUNS_PER_NETWORK):
        self.path = Path(path)
        self.max_runs = max_runs

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(f"Ignoring unreadable deployment record {self.path}: {exc}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring deployment record {self.path}: top level is not an object")
            return {}
        return data

    def contracts_for(self, network: str) -> Dict[str, str]:
        section = self.load().get(network)
        if not isinstance(section, dict):
            return {}
        contracts = section.get("contracts")
        if not isinstance(contracts, dict):
            return {}
        return {str(k): str(v) for k, v in contracts.items() if isinstance(v, str)}

    def record_run(self, network: str, contracts: Dict[str, str], run: Dict[str, Any]) -> None:
        data = self.load()
        section = data.get(network)
        if not isinstance(section, dict):
            section = {}
        merged = dict(section.get("contracts") or {})
        merged.update({k: v for k, v in contracts.items() if v})
        runs = list(section.get("runs") or [])
        runs.append(run)
        data[network] = {
            "contracts": merged,
            "runs": runs[-self.max_runs:],
            "updatedAt": isoformat_z(utc_now()),
        }
        try:
            self._write(data)
        except OSError as exc:
            logger.warning(f"Could not write deployment record {self.path}: {exc}")
            return
        logger.info(f"Deployment record updated for {network}: {self.path}")

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".deployments-", suffix=".json", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True, default=str)
                handle.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
