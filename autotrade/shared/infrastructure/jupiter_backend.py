"""
Jupiter Trading Backend
=======================
Live TradingBackend: swaps through the Jupiter aggregator, confirms and
inspects transactions over Solana JSON-RPC.

    submit_trade      quote -> swap tx -> sign (solders) -> sendTransaction,
                      then waits on getSignatureStatuses
    confirm           getTransaction (jsonParsed); on-chain errors raise
    get_swap_details  owner's pre/post balance deltas of the traded mints

REQUIREMENTS:
- SOLANA_PRIVATE_KEY (base58) in .env
- RPC_URL pointing at a mainnet RPC
"""

import asyncio
import base64
import math
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import base58
import httpx
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from config.settings import Settings
from autotrade.execution.models import SwapDetails
from autotrade.shared.system.logging import Logger

SOL_MINT = "So11111111111111111111111111111111111111112"
LAMPORTS_PER_SOL = 1_000_000_000


class BackendError(Exception):
    """Jupiter or RPC call failed."""


class SolanaWallet:
    """Keypair loaded from a base58 secret key (Phantom export format)."""

    def __init__(self, private_key_base58: str):
        if not private_key_base58:
            raise ValueError("No private key configured (SOLANA_PRIVATE_KEY)")
        self.keypair = Keypair.from_bytes(base58.b58decode(private_key_base58))
        self.public_key = str(self.keypair.pubkey())
        Logger.info(f"[WALLET] Loaded wallet: {self.public_key[:8]}...{self.public_key[-4:]}")

    @classmethod
    def from_settings(cls) -> "SolanaWallet":
        return cls(Settings.PRIVATE_KEY)


def _ui_amount(balance: Dict[str, Any]) -> float:
    token_amount = balance.get("uiTokenAmount", {})
    value = token_amount.get("uiAmountString")
    if value is None:
        value = token_amount.get("uiAmount") or 0
    return float(value)


def _account_keys(transaction: Dict[str, Any]) -> list:
    keys = transaction.get("transaction", {}).get("message", {}).get("accountKeys", [])
    return [k["pubkey"] if isinstance(k, dict) else k for k in keys]


def balance_deltas(transaction: Dict[str, Any], owner: str) -> Dict[str, float]:
    """Net change per mint for owner, native SOL folded into SOL_MINT."""
    meta = transaction.get("meta") or {}
    deltas: Dict[str, float] = {}

    for sign, key in ((-1, "preTokenBalances"), (1, "postTokenBalances")):
        for balance in meta.get(key) or []:
            if balance.get("owner") != owner:
                continue
            mint = balance["mint"]
            deltas[mint] = deltas.get(mint, 0.0) + sign * _ui_amount(balance)

    keys = _account_keys(transaction)
    if owner in keys:
        idx = keys.index(owner)
        pre = meta.get("preBalances") or []
        post = meta.get("postBalances") or []
        if idx < len(pre) and idx < len(post):
            lamports = post[idx] - pre[idx]
            if idx == 0:
                # fee payer: the network fee is not part of the swap
                lamports += meta.get("fee", 0)
            if lamports:
                deltas[SOL_MINT] = deltas.get(SOL_MINT, 0.0) + lamports / LAMPORTS_PER_SOL

    return deltas


def parse_swap_details(
    transaction: Optional[Dict[str, Any]],
    owner: str,
    input_mint: Optional[str] = None,
    output_mint: Optional[str] = None,
) -> Optional[SwapDetails]:
    """
    Derive swap amounts from a confirmed jsonParsed transaction.

    With known mints the input is what owner lost of input_mint and the
    output what owner gained of output_mint. Without them the largest
    decrease and largest increase are used. Missing sides stay None.
    """
    if not transaction:
        return None

    deltas = balance_deltas(transaction, owner)
    if not deltas:
        return SwapDetails()

    if input_mint is not None:
        spent = -deltas.get(input_mint, 0.0)
    else:
        spent = -min(deltas.values())
    if output_mint is not None:
        received = deltas.get(output_mint, 0.0)
    else:
        received = max(deltas.values())

    return SwapDetails(
        input_amount=spent if spent > 0 else None,
        output_amount=received if received > 0 else None,
    )


class JupiterTradingBackend:
    """
    TradingBackend over Jupiter + Solana RPC.

    Usage:
        backend = JupiterTradingBackend(SolanaWallet.from_settings())
        tx = await backend.submit_trade(USDC, 25.0, SOL_MINT)
    """

    def __init__(
        self,
        wallet: SolanaWallet,
        rpc_url: Optional[str] = None,
        quote_url: Optional[str] = None,
        swap_url: Optional[str] = None,
        slippage_bps: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        confirm_timeout_s: Optional[float] = None,
        poll_interval_s: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.wallet = wallet
        self.rpc_url = rpc_url or Settings.RPC_URL
        self.quote_url = quote_url or Settings.JUPITER_QUOTE_URL
        self.swap_url = swap_url or Settings.JUPITER_SWAP_URL
        self.slippage_bps = Settings.SLIPPAGE_BPS if slippage_bps is None else slippage_bps
        self._http = http_client
        self.confirm_timeout_s = Settings.CONFIRM_TIMEOUT_S if confirm_timeout_s is None else confirm_timeout_s
        self.poll_interval_s = Settings.CONFIRM_POLL_INTERVAL_S if poll_interval_s is None else poll_interval_s
        self.sleep = sleep
        self._decimals: Dict[str, int] = {}
        self._submitted: Dict[str, Tuple[str, str]] = {}  # signature -> (input, output)

    # =========================================================================
    # HTTP / RPC
    # =========================================================================

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self._http is not None:
            return await getattr(self._http, method)(url, **kwargs)
        async with httpx.AsyncClient(timeout=30) as client:
            return await getattr(client, method)(url, **kwargs)

    async def _rpc(self, method: str, params: list) -> Any:
        resp = await self._request(
            "post",
            self.rpc_url,
            json={"jsonrpc": "2.0", "id": 1, "method": method, "params": params},
        )
        if resp.status_code != 200:
            raise BackendError(f"RPC {method} failed: HTTP {resp.status_code}")
        data = resp.json()
        if data.get("error"):
            raise BackendError(f"RPC {method} error: {data['error'].get('message', data['error'])}")
        return data.get("result")

    async def get_token_decimals(self, mint: str) -> int:
        if mint not in self._decimals:
            result = await self._rpc("getTokenSupply", [mint])
            self._decimals[mint] = int(result["value"]["decimals"])
        return self._decimals[mint]

    # =========================================================================
    # TRADING BACKEND
    # =========================================================================

    async def get_quote(self, input_mint: str, output_mint: str, amount_units: int) -> Dict[str, Any]:
        resp = await self._request(
            "get",
            self.quote_url,
            params={
                "inputMint": input_mint,
                "outputMint": output_mint,
                "amount": str(amount_units),
                "slippageBps": self.slippage_bps,
            },
        )
        if resp.status_code != 200:
            raise BackendError(f"Quote failed: HTTP {resp.status_code}")
        return resp.json()

    async def submit_trade(self, from_address: str, amount: float, to_address: str) -> str:
        # raises ValueError on malformed addresses before anything is sent
        input_mint = str(Pubkey.from_string(from_address))
        output_mint = str(Pubkey.from_string(to_address))

        decimals = await self.get_token_decimals(input_mint)
        amount_units = int(round(amount * 10 ** decimals))

        quote = await self.get_quote(input_mint, output_mint, amount_units)
        Logger.debug(
            f"[JUPITER] Quote: {quote.get('inAmount')} -> {quote.get('outAmount')} "
            f"(impact: {quote.get('priceImpactPct', '0')}%)"
        )

        swap_resp = await self._request(
            "post",
            self.swap_url,
            json={
                "quoteResponse": quote,
                "userPublicKey": self.wallet.public_key,
                "wrapAndUnwrapSol": True,
                "dynamicComputeUnitLimit": True,
                "prioritizationFeeLamports": "auto",
            },
        )
        if swap_resp.status_code != 200:
            raise BackendError(f"Swap API error: HTTP {swap_resp.status_code}")
        swap_transaction = swap_resp.json().get("swapTransaction")
        if not swap_transaction:
            raise BackendError("No swap transaction returned")

        raw_tx = VersionedTransaction.from_bytes(base64.b64decode(swap_transaction))
        signed_tx = VersionedTransaction(raw_tx.message, [self.wallet.keypair])

        signature = await self._rpc(
            "sendTransaction",
            [
                base64.b64encode(bytes(signed_tx)).decode(),
                {"encoding": "base64", "skipPreflight": False},
            ],
        )
        if not signature:
            raise BackendError("sendTransaction returned no signature")
        Logger.info(f"[JUPITER] Sent {signature[:16]}..., waiting for confirmation")

        if not await self.wait_for_confirmation(signature):
            raise BackendError(
                f"Transaction {signature} not confirmed within {self.confirm_timeout_s:g}s"
            )
        self._submitted[signature] = (input_mint, output_mint)
        return signature

    async def wait_for_confirmation(self, signature: str) -> bool:
        """
        Poll getSignatureStatuses until the signature reaches confirmed.

        Returns False on timeout. A transaction that landed with an error
        raises BackendError.
        """
        polls = max(1, math.ceil(self.confirm_timeout_s / self.poll_interval_s))
        for poll in range(polls):
            result = await self._rpc("getSignatureStatuses", [[signature]])
            statuses = (result or {}).get("value") or []
            status = statuses[0] if statuses else None
            if status:
                if status.get("err"):
                    raise BackendError(f"Transaction {signature} failed on-chain: {status['err']}")
                if status.get("confirmationStatus") in ("confirmed", "finalized"):
                    return True
            if poll < polls - 1:
                await self.sleep(self.poll_interval_s)
        return False

    async def _get_transaction(self, transaction_id: str) -> Optional[Dict[str, Any]]:
        return await self._rpc(
            "getTransaction",
            [
                transaction_id,
                {
                    "encoding": "jsonParsed",
                    "maxSupportedTransactionVersion": 0,
                    "commitment": "confirmed",
                },
            ],
        )

    async def confirm(self, transaction_id: str) -> Optional[Dict[str, Any]]:
        transaction = await self._get_transaction(transaction_id)
        if transaction is None:
            return None
        err = (transaction.get("meta") or {}).get("err")
        if err:
            raise BackendError(f"Transaction {transaction_id} failed on-chain: {err}")
        return transaction

    async def get_swap_details(self, transaction_id: str) -> Optional[SwapDetails]:
        transaction = await self._get_transaction(transaction_id)
        input_mint, output_mint = self._submitted.pop(transaction_id, (None, None))
        return parse_swap_details(transaction, self.wallet.public_key, input_mint, output_mint)
