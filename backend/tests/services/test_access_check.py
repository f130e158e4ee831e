"""Access Check API — the authorizer exposed for front-end control gating.

Invariants:
    - Allowed → 200 {"allowed": true}
    - Denied → the same status and body the real action would return
"""

from app.core.domain_types import Role

from tests.services.session_fakes import (
    EMPLOYER_ID, OTHER_EMPLOYER_ID, SEEKER_ID, auth,
)

EMPLOYER = auth(EMPLOYER_ID, Role.EMPLOYER)


async def _check(client, headers, action, resource_id=None):
    body = {"action": action}
    if resource_id is not None:
        body["resource_id"] = resource_id
    return await client.post("/api/v1/access/check", json=body, headers=headers)


async def test_owner_may_update_own_job(client, job):
    res = await _check(client, EMPLOYER, "job.update", job.id)
    assert res.status_code == 200
    assert res.json() == {"allowed": True, "action": "job.update"}


async def test_other_employer_may_not_update_job(client, job):
    res = await _check(client, auth(OTHER_EMPLOYER_ID, Role.EMPLOYER), "job.update", job.id)
    assert res.status_code == 403


async def test_missing_job_is_404(client):
    res = await _check(client, EMPLOYER, "job.delete", 31337)
    assert res.status_code == 404


async def test_company_create_once(client, company):
    res = await _check(client, EMPLOYER, "company.create")
    assert res.status_code == 409
    other = await _check(client, auth(OTHER_EMPLOYER_ID, Role.EMPLOYER), "company.create")
    assert other.status_code == 200


async def test_job_create_needs_company(client, company):
    assert (await _check(client, EMPLOYER, "job.create")).status_code == 200
    res = await _check(client, auth(OTHER_EMPLOYER_ID, Role.EMPLOYER), "job.create")
    assert res.status_code == 403


async def test_company_update_missing_and_foreign_look_alike(client, other_company):
    foreign = await _check(client, EMPLOYER, "company.update", other_company.id)
    missing = await _check(client, EMPLOYER, "company.update", 777)
    assert foreign.status_code == missing.status_code == 403
    assert foreign.json() == missing.json()


async def test_application_create_is_seeker_only(client):
    assert (await _check(client, auth(SEEKER_ID, Role.SEEKER), "application.create")).status_code == 200
    assert (await _check(client, EMPLOYER, "application.create")).status_code == 403


async def test_action_needing_id_without_one_is_400(client):
    res = await _check(client, EMPLOYER, "application.view")
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "resource_id"
