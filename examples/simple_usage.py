#!/usr/bin/env python3
"""
Simple example of using the ArbWallet SDK on Arbitrum Sepolia.
"""
import asyncio
import logging
import os

from arbwallet_sdk import BroadcastUncertain, Wallet, WalletError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    """
    Demonstrate basic wallet operations.

    This example shows how to:
    1. Load a wallet from a private key
    2. Read native and token balances
    3. Send tokens and ETH
    """
    # Read configuration from environment
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    NETWORK = os.environ.get("ARBWALLET_NETWORK", "arbitrum-sepolia")
    TOKEN_ADDRESS = os.environ.get("TOKEN_ADDRESS")
    RECIPIENT = os.environ.get("RECIPIENT")

    # Verify configuration
    if not PRIVATE_KEY:
        print("ERROR: PRIVATE_KEY environment variable is required")
        return

    async with Wallet.from_private_key(PRIVATE_KEY, network=NETWORK, logger=logger) as wallet:
        await wallet.assert_chain_id()

        print("Address:", wallet.address)
        print("ETH Balance:", await wallet.balance())

        if not TOKEN_ADDRESS or not RECIPIENT:
            print("Set TOKEN_ADDRESS and RECIPIENT to try transfers")
            return

        print("Token Balance:", await wallet.get_token_balance(TOKEN_ADDRESS))

        try:
            token_tx = await wallet.send_token(TOKEN_ADDRESS, RECIPIENT, "10")
            print("Token TX Hash:", token_tx.tx_hash)
            print("Explorer:", wallet.tx_url(token_tx.tx_hash))

            eth_tx = await wallet.send_native(RECIPIENT, "0.001")
            print("ETH TX Hash:", eth_tx.tx_hash)

            receipt = await wallet.wait_for_receipt(eth_tx.tx_hash, timeout=60)
            if receipt is None:
                print("ETH transfer still pending")
            else:
                print(f"ETH transfer mined in block {receipt.block_number}, success={receipt.success}")
        except BroadcastUncertain as e:
            print(f"Broadcast outcome unknown, check {e.tx_hash} before resending")
        except WalletError as e:
            print(f"Error: {e}")


if __name__ == "__main__":
    asyncio.run(main())
