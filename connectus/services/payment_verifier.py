"""On-chain verification of job-posting fees.

The server looks the transaction up itself through the Solana JSON-RPC API and checks
it against the configured admin wallet and the poster's stored wallet; nothing the
client asserts about amount or recipient is trusted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

import requests

from connectus.config import LAMPORTS_PER_SOL, Settings, settings
from connectus.errors import ExternalServiceError, ServiceError


logger = logging.getLogger(__name__)

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
_TRANSFER_TYPES = ("transfer", "transferWithSeed")


class PaymentFailure(str, Enum):
    WALLET_MISSING = "wallet_missing"
    PROFILE_WALLET_MISMATCH = "profile_wallet_mismatch"
    TRANSACTION_VERIFICATION_FAILED = "transaction_verification_failed"
    RECIPIENT_MISMATCH = "recipient_mismatch"
    SENDER_MISMATCH = "sender_mismatch"
    AMOUNT_TOO_LOW = "amount_too_low"


class PaymentRejected(ServiceError):
    """The verifier answered and the payment does not qualify. Not retryable."""

    def __init__(self, failure: PaymentFailure, message: str) -> None:
        super().__init__(message, code=failure.value)
        self.failure = failure
        # Job posting stage the rejection stopped at; set by the caller.
        self.stage: str | None = None

    def to_detail(self) -> dict[str, str]:
        detail = super().to_detail()
        if self.stage:
            detail["stage"] = self.stage
        return detail


class VerifierUnavailable(ExternalServiceError):
    code = "verifier_unavailable"


@dataclass(frozen=True)
class VerifiedTransfer:
    signature: str
    sender: str
    recipient: str
    amount_lamports: int | None
    confirmed: bool = True

    def amount_sol(self, default_sol: float) -> float:
        if self.amount_lamports is None:
            return default_sol
        return self.amount_lamports / LAMPORTS_PER_SOL


class TransferVerifier(Protocol):
    def verify_transfer(self, signature: str, expected_recipient: str, expected_sender: str) -> VerifiedTransfer:
        ...


class SolanaRpcClient:
    def __init__(
        self,
        rpc_url: str,
        *,
        commitment: str = "confirmed",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.commitment = commitment
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_parsed_transaction(self, signature: str) -> dict[str, Any] | None:
        """``getTransaction`` with ``jsonParsed`` encoding; ``None`` when not found/confirmed."""
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "getTransaction",
            "params": [
                signature,
                {
                    "encoding": "jsonParsed",
                    "commitment": self.commitment,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        }
        try:
            response = self.session.post(self.rpc_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.Timeout as exc:
            logger.warning("rpc.unavailable timeout url=%s signature=%s", self.rpc_url, signature)
            raise VerifierUnavailable("Timed out contacting the Solana RPC node. Try again.") from exc
        except (requests.RequestException, ValueError) as exc:
            logger.warning("rpc.unavailable url=%s signature=%s error=%s", self.rpc_url, signature, exc)
            raise VerifierUnavailable("Could not reach the Solana RPC node. Try again.") from exc

        if not isinstance(body, dict):
            raise VerifierUnavailable("Unexpected response from the Solana RPC node.")

        error = body.get("error")
        if error:
            # Malformed or unknown signature: the node answered, the payment is invalid.
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise PaymentRejected(
                PaymentFailure.TRANSACTION_VERIFICATION_FAILED,
                f"Payment verification failed: {message}",
            )

        result = body.get("result")
        return result if isinstance(result, dict) else None


def _pubkey(value: Any) -> str | None:
    if isinstance(value, dict):
        value = value.get("pubkey")
    return str(value) if value else None


def _system_transfers(tx: dict[str, Any]) -> list[dict[str, Any]]:
    message = (tx.get("transaction") or {}).get("message") or {}
    transfers: list[dict[str, Any]] = []
    for inst in message.get("instructions") or []:
        if not isinstance(inst, dict):
            continue
        if inst.get("programId") != SYSTEM_PROGRAM_ID and inst.get("program") != "system":
            continue
        parsed = inst.get("parsed")
        if not isinstance(parsed, dict) or parsed.get("type") not in _TRANSFER_TYPES:
            continue
        info = parsed.get("info")
        if isinstance(info, dict):
            transfers.append(info)
    return transfers


def _fee_payer(tx: dict[str, Any]) -> str | None:
    keys = ((tx.get("transaction") or {}).get("message") or {}).get("accountKeys") or []
    return _pubkey(keys[0]) if keys else None


def _balance_delta(tx: dict[str, Any]) -> int | None:
    meta = tx.get("meta") or {}
    pre = meta.get("preBalances") or []
    post = meta.get("postBalances") or []
    if not pre or not post:
        return None
    delta = int(pre[0]) - int(post[0])
    return delta if delta > 0 else None


class SolanaTransferVerifier:
    def __init__(self, client: SolanaRpcClient, *, min_lamports: int = 0) -> None:
        self.client = client
        self.min_lamports = min_lamports

    def verify_transfer(self, signature: str, expected_recipient: str, expected_sender: str) -> VerifiedTransfer:
        tx = self.client.get_parsed_transaction(signature)
        if tx is None:
            raise PaymentRejected(
                PaymentFailure.TRANSACTION_VERIFICATION_FAILED,
                "Payment verification failed: transaction not found or not confirmed.",
            )

        meta = tx.get("meta")
        if not isinstance(meta, dict) or meta.get("err") is not None:
            raise PaymentRejected(
                PaymentFailure.TRANSACTION_VERIFICATION_FAILED,
                "Payment verification failed: transaction did not execute successfully.",
            )

        transfers = _system_transfers(tx)
        if not transfers:
            raise PaymentRejected(
                PaymentFailure.TRANSACTION_VERIFICATION_FAILED,
                "Payment verification failed: no SOL transfer in transaction.",
            )

        transfer = next((t for t in transfers if t.get("destination") == expected_recipient), None)
        if transfer is None:
            raise PaymentRejected(PaymentFailure.RECIPIENT_MISMATCH, "Incorrect recipient for payment.")

        sender = _pubkey(transfer.get("source")) or _fee_payer(tx)
        if not sender or sender != expected_sender:
            raise PaymentRejected(
                PaymentFailure.SENDER_MISMATCH,
                "Sender wallet does not match authenticated user.",
            )

        lamports = transfer.get("lamports")
        amount = int(lamports) if isinstance(lamports, (int, float)) and lamports > 0 else _balance_delta(tx)
        if amount is not None and amount < self.min_lamports:
            raise PaymentRejected(
                PaymentFailure.AMOUNT_TOO_LOW,
                f"Payment of {amount} lamports is below the posting fee of {self.min_lamports} lamports.",
            )

        return VerifiedTransfer(
            signature=signature,
            sender=sender,
            recipient=expected_recipient,
            amount_lamports=amount,
        )


def build_transfer_verifier(cfg: Settings) -> SolanaTransferVerifier:
    client = SolanaRpcClient(
        cfg.solana_rpc_url,
        commitment=cfg.solana_commitment,
        timeout=cfg.rpc_timeout_seconds,
    )
    return SolanaTransferVerifier(client, min_lamports=cfg.job_posting_fee_lamports)


def get_transfer_verifier() -> TransferVerifier:
    return build_transfer_verifier(settings)
