"""Live validation script - resolve real handles and report what each strategy found."""

import asyncio
import sys
from datetime import datetime

from pfproxy import ServiceConfig
from pfproxy.core.extractor import clean_avatar_url, extract_from_state
from pfproxy.core.fetcher import build_profile_url, open_profile, read_og_image, read_state_text
from pfproxy.core.session import BrowserSession

HANDLES = [
    "tiktok",
    "khaby.lame",
    "charlidamelio",
]


async def validate_handle(session: BrowserSession, config: ServiceConfig, handle: str) -> dict:
    """Load one profile and run both extraction strategies independently."""
    print(f"\n{'='*60}")
    print(f"Resolving @{handle}...")
    print(f"{'='*60}")

    start = datetime.now()
    url = build_profile_url(handle, config.profile_url_template)

    try:
        async with session.page() as page:
            status = await open_profile(page, url)
            state_avatar = extract_from_state(await read_state_text(page))
            og_avatar = await read_og_image(page)
    except Exception as e:
        print(f"❌ Failed: {e}")
        return {"handle": handle, "success": False, "error": str(e)}

    duration_ms = (datetime.now() - start).total_seconds() * 1000
    print(f"✓ Loaded in {duration_ms:.0f}ms (HTTP {status})")
    print(f"  state blob: {clean_avatar_url(state_avatar) or '-'}")
    print(f"  og:image:   {clean_avatar_url(og_avatar) or '-'}")

    return {
        "handle": handle,
        "success": bool(state_avatar or og_avatar),
        "state": bool(state_avatar),
        "og": bool(og_avatar),
        "duration_ms": duration_ms,
    }


async def main():
    config = ServiceConfig()
    results = []

    async with BrowserSession(config) as session:
        for handle in HANDLES:
            results.append(await validate_handle(session, config, handle))
            await asyncio.sleep(2)

    print("\n| Handle          | State | og:image | Duration |")
    print("|-----------------|-------|----------|----------|")
    for r in results:
        state = "✓" if r.get("state") else "❌"
        og = "✓" if r.get("og") else "❌"
        duration = f"{r.get('duration_ms', 0):.0f}ms"
        print(f"| @{r['handle']:<14} | {state:<5} | {og:<8} | {duration:<8} |")

    if not all(r["success"] for r in results):
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
