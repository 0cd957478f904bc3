from __future__ import annotations

from datetime import datetime, timedelta, timezone

from connectus.config import settings
from connectus.database import SessionLocal
from connectus.models.jobs import Job
from connectus.models.payment import Payment
from connectus.services.payment_verifier import PaymentFailure, PaymentRejected, VerifierUnavailable


POSTER_WALLET = "PosterWa11et111111111111111111111111111111"


def _future(days: int = 7) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _job_payload(**overrides) -> dict:
    payload = {
        "title": "Frontend Developer",
        "description": "Build the dashboard",
        "skills": "React, Tailwind CSS",
        "budget": "50000",
        "deadline": _future(),
        "tx_signature": "sig-ok",
    }
    payload.update(overrides)
    return payload


def _poster(client, register_and_login, email: str = "poster@example.com", wallet: str | None = POSTER_WALLET) -> dict:
    headers = register_and_login(email)
    if wallet:
        r = client.post("/api/profile", json={"public_wallet_address": wallet}, headers=headers)
        assert r.status_code == 200
    return headers


def _counts() -> tuple[int, int]:
    db = SessionLocal()
    try:
        return db.query(Job).count(), db.query(Payment).count()
    finally:
        db.close()


def test_verified_payment_creates_job_and_payment(client, register_and_login, verifier) -> None:
    headers = _poster(client, register_and_login)
    verifier.outcomes["sig-ok"] = 10_000_000

    r = client.post("/api/jobs", json=_job_payload(), headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["msg"] == "Job posted successfully!"
    assert body["job"]["skills"] == ["React", "Tailwind CSS"]
    assert body["payment"]["amount"] == 0.01
    assert body["payment"]["tx_signature"] == "sig-ok"
    assert body["payment"]["job_id"] == body["job"]["id"]

    # Recipient is the configured admin wallet, sender the stored profile wallet.
    assert verifier.calls == [("sig-ok", settings.admin_wallet_address, POSTER_WALLET)]
    assert _counts() == (1, 1)

    mine = client.get("/api/jobs/my-jobs", headers=headers)
    assert [j["title"] for j in mine.json()] == ["Frontend Developer"]
    history = client.get("/api/profile/payment-history", headers=headers)
    assert [p["tx_signature"] for p in history.json()] == ["sig-ok"]


def test_same_signature_twice_yields_one_payment(client, register_and_login) -> None:
    headers = _poster(client, register_and_login)
    first = client.post("/api/jobs", json=_job_payload(tx_signature="sig-replay"), headers=headers)
    assert first.status_code == 200

    second = client.post("/api/jobs", json=_job_payload(title="Another", tx_signature="sig-replay"), headers=headers)
    assert second.status_code == 409
    assert second.json()["detail"]["code"] == "duplicate_payment"
    assert _counts() == (1, 1)


def test_deadline_in_past_or_now_is_rejected_before_verification(client, register_and_login, verifier) -> None:
    headers = _poster(client, register_and_login)
    past = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()

    r = client.post("/api/jobs", json=_job_payload(deadline=past), headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == {"code": "validation_error", "message": "Deadline must be in the future"}

    missing = client.post("/api/jobs", json=_job_payload(deadline=None), headers=headers)
    assert missing.status_code == 400
    assert missing.json()["detail"]["message"] == "Deadline is required"

    assert verifier.calls == []
    assert _counts() == (0, 0)


def test_missing_signature_is_rejected(client, register_and_login, verifier) -> None:
    headers = _poster(client, register_and_login)
    r = client.post("/api/jobs", json=_job_payload(tx_signature=None), headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"]["message"] == "Payment transaction signature is required."
    assert verifier.calls == []


def test_poster_without_wallet_is_rejected(client, register_and_login, verifier) -> None:
    headers = _poster(client, register_and_login, wallet=None)
    r = client.post("/api/jobs", json=_job_payload(), headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "wallet_missing"
    assert verifier.calls == []


def test_connected_wallet_must_match_profile_wallet(client, register_and_login, verifier) -> None:
    headers = _poster(client, register_and_login)
    r = client.post("/api/jobs", json=_job_payload(walletAddress="SomeoneElse"), headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "profile_wallet_mismatch"
    assert verifier.calls == []


def test_verifier_rejections_are_passed_through(client, register_and_login, verifier) -> None:
    headers = _poster(client, register_and_login)
    cases = {
        "sig-unconfirmed": PaymentFailure.TRANSACTION_VERIFICATION_FAILED,
        "sig-recipient": PaymentFailure.RECIPIENT_MISMATCH,
        "sig-sender": PaymentFailure.SENDER_MISMATCH,
    }
    for signature, failure in cases.items():
        verifier.outcomes[signature] = PaymentRejected(failure, "nope")
        r = client.post("/api/jobs", json=_job_payload(tx_signature=signature), headers=headers)
        assert r.status_code == 400
        assert r.json()["detail"]["code"] == failure.value

    assert _counts() == (0, 0)


def test_unreachable_verifier_is_retryable_503(client, register_and_login, verifier) -> None:
    headers = _poster(client, register_and_login)
    verifier.outcomes["sig-down"] = VerifierUnavailable("Could not reach the Solana RPC node. Try again.")
    r = client.post("/api/jobs", json=_job_payload(tx_signature="sig-down"), headers=headers)
    assert r.status_code == 503
    assert r.json()["detail"]["code"] == "verifier_unavailable"
    assert _counts() == (0, 0)


def test_missing_admin_wallet_is_a_server_error(client, register_and_login, monkeypatch) -> None:
    headers = _poster(client, register_and_login)
    monkeypatch.setattr(settings, "admin_wallet_address", None)
    r = client.post("/api/jobs", json=_job_payload(), headers=headers)
    assert r.status_code == 500
    assert r.json()["detail"]["code"] == "server_misconfigured"


def test_job_creation_requires_auth(client) -> None:
    assert client.post("/api/jobs", json=_job_payload()).status_code == 401


def test_list_search_and_detail(client, register_and_login) -> None:
    headers = _poster(client, register_and_login)
    client.post("/api/jobs", json=_job_payload(tx_signature="s1"), headers=headers)
    client.post(
        "/api/jobs",
        json=_job_payload(title="Rust Engineer", description="Systems work", skills=["Rust"], tx_signature="s2"),
        headers=headers,
    )

    all_jobs = client.get("/api/jobs").json()
    assert [j["title"] for j in all_jobs] == ["Rust Engineer", "Frontend Developer"]

    by_skill = client.get("/api/jobs", params={"q": "tailwind"}).json()
    assert [j["title"] for j in by_skill] == ["Frontend Developer"]
    by_title = client.get("/api/jobs", params={"q": "rust eng"}).json()
    assert [j["title"] for j in by_title] == ["Rust Engineer"]

    job_id = all_jobs[0]["id"]
    assert client.get(f"/api/jobs/{job_id}").json()["title"] == "Rust Engineer"
    missing = client.get("/api/jobs/9999")
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "not_found"


def test_rejection_detail_names_the_stage(client, register_and_login, verifier) -> None:
    headers = _poster(client, register_and_login)
    verifier.outcomes["sig-bad"] = PaymentRejected(PaymentFailure.RECIPIENT_MISMATCH, "Incorrect recipient for payment.")
    r = client.post("/api/jobs", json=_job_payload(tx_signature="sig-bad"), headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == {
        "code": "recipient_mismatch",
        "message": "Incorrect recipient for payment.",
        "stage": "transaction_submitted",
    }
