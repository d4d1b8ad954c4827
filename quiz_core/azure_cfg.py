# quiz_core/azure_cfg.py
from __future__ import annotations
import os, json, pathlib
from dataclasses import dataclass
from openai import AzureOpenAI

_ENV_KEYS = {
    "endpoint": "AZURE_OPENAI_ENDPOINT",
    "api_key": "AZURE_OPENAI_API_KEY",
    "api_version": "AZURE_OPENAI_API_VERSION",
    "deployment": "AZURE_OPENAI_DEPLOYMENT",
}


class AzureNotConfigured(RuntimeError):
    pass


@dataclass(frozen=True)
class AzureSettings:
    endpoint: str
    api_key: str
    deployment: str
    api_version: str


def _from_env() -> dict[str, str]:
    return {field: os.getenv(env, "") for field, env in _ENV_KEYS.items()}


def _from_json(path: str = ".azure_config.json") -> dict[str, str]:
    p = pathlib.Path(path)
    if not p.exists(): return {}
    try:
        j = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return {field: str(j.get(field, "")) for field in _ENV_KEYS}


def _merged() -> dict[str, str]:
    cfg = _from_env()
    if not all(cfg.values()):
        for k, v in _from_json().items():
            if not cfg.get(k): cfg[k] = v
    return cfg


def is_configured() -> bool:
    return all(_merged().values())


def settings() -> AzureSettings:
    cfg = _merged()
    missing = [_ENV_KEYS[k] for k, v in cfg.items() if not v]
    if missing:
        raise AzureNotConfigured(f"Azure OpenAI not configured. Missing: {', '.join(missing)}")
    return AzureSettings(**cfg)


def client() -> AzureOpenAI:
    s = settings()
    return AzureOpenAI(azure_endpoint=s.endpoint, api_key=s.api_key, api_version=s.api_version)
