"""Coach workspace, pricing tier, generation and public page endpoints."""
import uuid

import pytest
from httpx import AsyncClient

from blueprintos.models.subscription import WorkspaceFeatures, WorkspaceSubscription
from tests.conftest import auth_headers, enable_custom_domains, signup_coach

LONG_PROMPT = (
    "I help new managers in tech build confident leadership habits through weekly "
    "coaching, peer circles and practical feedback frameworks that stick."
)


async def _tier(client, headers, **data):
    payload = {"name": "Core", "price": "199.00", "features": ["Weekly call"]}
    payload.update(data)
    resp = await client.post("/api/v1/pricing-tiers", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_read_workspace_requires_coach(client: AsyncClient):
    coach = await signup_coach(client)
    assert (await client.get("/api/v1/workspace", headers=coach["headers"])).status_code == 200

    resp = await client.post("/api/v1/auth/signup", json={
        "email": "client@example.com", "password": "Passw0rd!", "fullName": "Cli", "role": "client",
    })
    client_headers = auth_headers(resp.json()["userId"])
    assert (await client.get("/api/v1/workspace", headers=client_headers)).status_code == 403


@pytest.mark.asyncio
async def test_branding_update_syncs_theme(client: AsyncClient):
    coach = await signup_coach(client)

    resp = await client.patch("/api/v1/workspace", headers=coach["headers"], json={
        "primary_color": "#112233", "tagline": "Lead with clarity",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["primary_color"] == "#112233"
    assert body["landing_page_config"]["theme"]["primary_color"] == "#112233"

    bad = await client.patch("/api/v1/workspace", headers=coach["headers"], json={"primary_color": "blue"})
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_subdomain_and_domain_conflicts(client: AsyncClient, db):
    a = await signup_coach(client, email="a@example.com", workspace_name="Alpha")
    b = await signup_coach(client, email="b@example.com", workspace_name="Beta")
    enable_custom_domains(db, a["workspaceId"])
    enable_custom_domains(db, b["workspaceId"])

    ok = await client.patch("/api/v1/workspace", headers=a["headers"], json={
        "subdomain": "alpha", "custom_domain": "Coach.Alpha.com",
    })
    assert ok.status_code == 200
    assert ok.json()["custom_domain"] == "coach.alpha.com"

    taken = await client.patch("/api/v1/workspace", headers=b["headers"], json={"subdomain": "alpha"})
    assert taken.status_code == 409
    domain = await client.patch("/api/v1/workspace", headers=b["headers"], json={"custom_domain": "coach.alpha.com"})
    assert domain.status_code == 409
    reserved = await client.patch("/api/v1/workspace", headers=b["headers"], json={"subdomain": "www"})
    assert reserved.status_code == 400


@pytest.mark.asyncio
async def test_custom_domain_needs_plan_feature(client: AsyncClient):
    coach = await signup_coach(client)
    resp = await client.patch("/api/v1/workspace", headers=coach["headers"], json={"custom_domain": "janedoe.com"})
    assert resp.status_code == 403

    workspace = (await client.get("/api/v1/workspace", headers=coach["headers"])).json()
    assert workspace["custom_domain"] is None


@pytest.mark.asyncio
async def test_custom_domain_falls_back_to_subscription_plan(client: AsyncClient, db):
    coach = await signup_coach(client)
    workspace_id = uuid.UUID(coach["workspaceId"])
    db.query(WorkspaceFeatures).filter(WorkspaceFeatures.workspace_id == workspace_id).delete()
    db.commit()

    starter = await client.patch("/api/v1/workspace", headers=coach["headers"], json={"custom_domain": "janedoe.com"})
    assert starter.status_code == 403

    db.query(WorkspaceSubscription).filter(
        WorkspaceSubscription.workspace_id == workspace_id
    ).update({"plan_tier": "pro"})
    db.commit()

    pro = await client.patch("/api/v1/workspace", headers=coach["headers"], json={"custom_domain": "janedoe.com"})
    assert pro.status_code == 200
    assert pro.json()["custom_domain"] == "janedoe.com"


@pytest.mark.asyncio
async def test_custom_domain_format_and_platform_hosts(client: AsyncClient, db):
    a = await signup_coach(client, email="a@example.com", workspace_name="Alpha")
    b = await signup_coach(client, email="b@example.com", workspace_name="Beta")
    enable_custom_domains(db, b["workspaceId"])
    a_subdomain = (await client.get("/api/v1/workspace", headers=a["headers"])).json()["subdomain"]

    for domain in ("not a domain!!", "localhost", "-bad.com", "10.0.0.1"):
        resp = await client.patch("/api/v1/workspace", headers=b["headers"], json={"custom_domain": domain})
        assert resp.status_code == 400, domain

    for domain in (f"{a_subdomain}.blueprintos.com", "BlueprintOS.com", "www.blueprintos.com."):
        resp = await client.patch("/api/v1/workspace", headers=b["headers"], json={"custom_domain": domain})
        assert resp.status_code == 400, domain

    page = await client.get("/api/v1/public/landing-page", headers={"Host": f"{a_subdomain}.blueprintos.com"})
    assert page.json()["workspace"]["subdomain"] == a_subdomain


@pytest.mark.asyncio
async def test_invalid_subdomain_rejected(client: AsyncClient):
    coach = await signup_coach(client)
    before = (await client.get("/api/v1/workspace", headers=coach["headers"])).json()["subdomain"]

    for slug in ("", "-acme", "acme-", "ac--me", "acme.io"):
        resp = await client.patch("/api/v1/workspace", headers=coach["headers"], json={"subdomain": slug})
        assert resp.status_code == 422, slug

    after = (await client.get("/api/v1/workspace", headers=coach["headers"])).json()["subdomain"]
    assert after == before


@pytest.mark.asyncio
async def test_null_leaves_required_fields_alone(client: AsyncClient, db):
    coach = await signup_coach(client)
    enable_custom_domains(db, coach["workspaceId"])
    h = coach["headers"]

    resp = await client.patch("/api/v1/workspace", headers=h, json={
        "name": None, "subdomain": None, "tagline": "New", "custom_domain": "janedoe.com",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Acme Coaching"
    assert body["subdomain"]
    assert body["tagline"] == "New"

    cleared = await client.patch("/api/v1/workspace", headers=h, json={"custom_domain": None})
    assert cleared.status_code == 200
    assert cleared.json()["custom_domain"] is None


@pytest.mark.asyncio
async def test_subdomain_availability(client: AsyncClient):
    a = await signup_coach(client, email="a@example.com", workspace_name="Alpha")
    await client.patch("/api/v1/workspace", headers=a["headers"], json={"subdomain": "alpha"})
    b = await signup_coach(client, email="b@example.com", workspace_name="Beta")

    taken = await client.get("/api/v1/workspace/subdomain-availability", params={"name": "Alpha"}, headers=b["headers"])
    assert taken.json() == {"subdomain": "alpha", "valid": True, "available": False}

    free = await client.get("/api/v1/workspace/subdomain-availability", params={"name": "Beta Coaching"}, headers=b["headers"])
    assert free.json()["available"] is True


@pytest.mark.asyncio
async def test_onboarding_steps_are_monotonic(client: AsyncClient):
    coach = await signup_coach(client)
    h = coach["headers"]

    await client.post("/api/v1/workspace/onboarding/steps", headers=h, json={"steps": ["step1", "step3"]})
    resp = await client.post("/api/v1/workspace/onboarding/steps", headers=h, json={"steps": ["step2"]})
    steps = resp.json()["onboarding_steps"]
    assert [steps[f"step{i}"] for i in range(1, 7)] == [True, True, True, False, False, False]

    bad = await client.post("/api/v1/workspace/onboarding/steps", headers=h, json={"steps": ["step9"]})
    assert bad.status_code == 400

    done = await client.post("/api/v1/workspace/onboarding/complete", headers=h)
    assert all(done.json()["onboarding_steps"].values())
    me = await client.get("/api/v1/me", headers=h)
    assert me.json()["profile"]["onboarding_completed"] is True


@pytest.mark.asyncio
async def test_only_one_featured_tier(client: AsyncClient):
    coach = await signup_coach(client)
    h = coach["headers"]

    first = await _tier(client, h, name="Basic", is_featured=True, order_index=0)
    second = await _tier(client, h, name="Pro", is_featured=True, order_index=1)

    tiers = (await client.get("/api/v1/pricing-tiers", headers=h)).json()
    featured = {t["name"]: t["is_featured"] for t in tiers}
    assert featured == {"Basic": False, "Pro": True}

    await client.patch(f"/api/v1/pricing-tiers/{first['id']}", headers=h, json={"is_featured": True})
    tiers = (await client.get("/api/v1/pricing-tiers", headers=h)).json()
    assert [t["name"] for t in tiers if t["is_featured"]] == ["Basic"]

    assert (await client.delete(f"/api/v1/pricing-tiers/{second['id']}", headers=h)).status_code == 204
    assert len((await client.get("/api/v1/pricing-tiers", headers=h)).json()) == 1


@pytest.mark.asyncio
async def test_pricing_tier_validation_and_isolation(client: AsyncClient):
    a = await signup_coach(client, email="a@example.com", workspace_name="Alpha")
    b = await signup_coach(client, email="b@example.com", workspace_name="Beta")

    negative = await client.post("/api/v1/pricing-tiers", headers=a["headers"], json={"name": "X", "price": "-1"})
    assert negative.status_code == 422

    tier = await _tier(client, a["headers"])
    other = await client.patch(f"/api/v1/pricing-tiers/{tier['id']}", headers=b["headers"], json={"name": "Mine"})
    assert other.status_code == 404


@pytest.mark.asyncio
async def test_generate_without_save_leaves_page_untouched(client: AsyncClient):
    coach = await signup_coach(client)
    h = coach["headers"]

    resp = await client.post("/api/v1/landing-page/generate", headers=h, json={"prompt": LONG_PROMPT, "niche": "executive"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["saved"] is False
    assert body["config"]["hero"]["headline"] == "Lead with Impact"

    workspace = (await client.get("/api/v1/workspace", headers=h)).json()
    assert workspace["landing_page_config"]["hero"]["headline"] == "Transform Your Life"
    assert (await client.get("/api/v1/landing-page/prompts/active", headers=h)).status_code == 404


@pytest.mark.asyncio
async def test_generate_and_save(client: AsyncClient):
    coach = await signup_coach(client)
    h = coach["headers"]

    resp = await client.post("/api/v1/landing-page/generate", headers=h, json={
        "prompt": LONG_PROMPT, "niche": "fitness", "save": True,
    })
    assert resp.json()["saved"] is True

    active = (await client.get("/api/v1/landing-page/prompts/active", headers=h)).json()
    assert active["prompt_text"] == LONG_PROMPT
    assert active["generated_config"]["about"]["description"] == LONG_PROMPT[:200]

    workspace = (await client.get("/api/v1/workspace", headers=h)).json()
    assert workspace["landing_page_config"]["hero"]["headline"] == "Transform Your Fitness Journey"


@pytest.mark.asyncio
async def test_prompt_templates(client: AsyncClient):
    body = (await client.get("/api/v1/landing-page/prompt-templates")).json()
    assert len(body["templates"]) == 10
    assert {t["value"] for t in body["tones"]} >= {"professional", "motivational"}


@pytest.mark.asyncio
async def test_section_patch_is_field_level(client: AsyncClient):
    coach = await signup_coach(client)
    h = coach["headers"]

    resp = await client.patch("/api/v1/workspace/landing-page/hero", headers=h, json={"headline": "New"})
    hero = resp.json()["landing_page_config"]["hero"]
    assert hero["headline"] == "New"
    assert hero["subheadline"] == "Elite coaching for high performers ready to level up"

    assert (await client.patch("/api/v1/workspace/landing-page/faq", headers=h, json={})).status_code == 404
    bad = await client.patch("/api/v1/workspace/landing-page/about", headers=h, json={"image_placement": "top"})
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_public_landing_page_end_to_end(client: AsyncClient):
    coach = await signup_coach(client)
    h = coach["headers"]
    await client.patch("/api/v1/workspace", headers=h, json={"subdomain": "acme"})
    await client.put("/api/v1/workspace/landing-page", headers=h, json={
        "hero": {"headline": "X"},
        "sections_enabled": ["hero", "testimonials", "pricing", "cta"],
    })
    await _tier(client, h, name="Core", is_featured=True)
    await _tier(client, h, name="Hidden", is_active=False)

    resp = await client.get("/api/v1/public/landing-page", headers={"Host": "acme.blueprintos.com"})
    assert resp.status_code == 200
    page = resp.json()
    assert page["workspace"]["subdomain"] == "acme"
    assert [s["key"] for s in page["sections"]] == ["hero", "pricing", "cta"]

    hero = page["sections"][0]["props"]
    assert hero["headline"] == "X"
    assert hero["subheadline"] == "Elite coaching for high performers ready to level up"

    pricing = page["sections"][1]["props"]
    assert [t["name"] for t in pricing["tiers"]] == ["Core"]
    assert pricing["tiers"][0]["badge"] == "MOST POPULAR"


@pytest.mark.asyncio
async def test_public_landing_page_unknown_host(client: AsyncClient):
    resp = await client.get("/api/v1/public/landing-page", params={"host": "nobody.blueprintos.com"})
    page = resp.json()
    assert resp.status_code == 200
    assert page["workspace"] is None
    assert page["sections"] == []
    assert page["theme"]["primary_color"] == "#3B82F6"


@pytest.mark.asyncio
async def test_public_branding_by_custom_domain(client: AsyncClient, db):
    coach = await signup_coach(client)
    enable_custom_domains(db, coach["workspaceId"])
    await client.patch("/api/v1/workspace", headers=coach["headers"], json={
        "custom_domain": "janedoe.com", "secondary_color": "#445566",
    })

    resp = await client.get("/api/v1/public/branding", headers={"Host": "janedoe.com"})
    body = resp.json()
    assert body["name"] == "Acme Coaching"
    assert body["secondary_color"] == "#445566"

    default = await client.get("/api/v1/public/branding", params={"host": "www.blueprintos.com"})
    assert default.json()["workspace_id"] is None


@pytest.mark.asyncio
async def test_health_and_metrics(client: AsyncClient):
    assert (await client.get("/health")).json()["status"] == "ok"
    metrics = await client.get("/metrics")
    assert metrics.status_code == 200
    assert "workspace_resolutions_total" in metrics.text
