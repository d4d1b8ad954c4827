# tools/azure_env.py
from __future__ import annotations
import os, json, argparse, subprocess, sys

REQUIRED = ("AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_API_KEY", "AZURE_OPENAI_DEPLOYMENT")

def load_cfg(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    # .azure_config.json uses short keys; accept the env-style names too
    cfg = {
        "AZURE_OPENAI_ENDPOINT": raw.get("endpoint") or raw.get("AZURE_OPENAI_ENDPOINT"),
        "AZURE_OPENAI_API_KEY": raw.get("api_key") or raw.get("AZURE_OPENAI_API_KEY"),
        "AZURE_OPENAI_DEPLOYMENT": raw.get("deployment") or raw.get("AZURE_OPENAI_DEPLOYMENT"),
        "AZURE_OPENAI_API_VERSION": raw.get("api_version") or raw.get("AZURE_OPENAI_API_VERSION") or "2024-08-01-preview",
    }
    missing = [k for k in REQUIRED if not cfg.get(k)]
    if missing:
        print(f"Missing {', '.join(missing)} in {path}", file=sys.stderr); sys.exit(1)
    cfg["LLM_BACKEND"] = "azure"
    cfg["USE_LLM_DRAFT"] = "1"
    return cfg

def main():
    ap = argparse.ArgumentParser(description="Run a command with Azure OpenAI draft generation enabled.")
    ap.add_argument("--config", default=".azure_config.json")
    ap.add_argument("--run", nargs=argparse.REMAINDER,
                    help="Command to run, default: uvicorn api.app:app --reload")
    args = ap.parse_args()

    env = os.environ.copy(); env.update(load_cfg(args.config))
    cmd = args.run or [sys.executable, "-m", "uvicorn", "api.app:app", "--reload"]
    print("Deployment:", env["AZURE_OPENAI_DEPLOYMENT"], "| API ver:", env["AZURE_OPENAI_API_VERSION"])
    print("Launching:", " ".join(cmd))
    subprocess.run(cmd, env=env, check=True)

if __name__ == "__main__":
    main()
