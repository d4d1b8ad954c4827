# tools/azure_smoke.py
from __future__ import annotations
from openai import NotFoundError
from quiz_core.azure_cfg import client, settings
from quiz_core.draft import Draft, build_prompt, extract_json

def main():
    s = settings()
    print("Endpoint :", s.endpoint)
    print("Deploy   :", s.deployment, "(deployment name passed as model=)")
    print("API ver  :", s.api_version)
    cli = client()
    try:
        r = cli.chat.completions.create(
            model=s.deployment,
            messages=[{"role": "user", "content": build_prompt("morning routines")}],
            temperature=0.0,
            response_format={"type": "json_object"},
        )
    except NotFoundError:
        print("ERROR 404: Azure cannot find this deployment for this API version.")
        print("→ Verify the deployment name and api_version against the portal's Target URI.")
        raise
    draft = Draft.model_validate(extract_json(r.choices[0].message.content or ""))
    print(f"Draft    : {draft.title!r}, {len(draft.axes)} axes, {len(draft.questions)} questions")

if __name__ == "__main__":
    main()
