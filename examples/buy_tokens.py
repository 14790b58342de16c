#!/usr/bin/env python3
"""
Purchase tokens for a user with the contract's buy function.
"""
import logging

from tokenmint_sdk import ChainConnection, ContractProxy, MintConfig, MintFlow, TransactionRequest, tx_url


def main():
    logging.basicConfig(level=logging.INFO)

    config = MintConfig.from_env()
    connection = ChainConnection.from_config(config)
    if config.chain_id is not None:
        connection.assert_chain_id()
    contract = ContractProxy.from_config(connection, config)
    flow = MintFlow(contract, token_decimals=config.token_decimals)

    # 1000 tokens, scaled to base units by the flow
    receipt = flow.purchase(TransactionRequest(
        amount=1000,
        recipient="0x81878429C68350DdB41Aaaf05cF2f03bf37e72D5"
    ))
    if receipt:
        print(f"Block explorer: {tx_url(receipt.tx_hash, config.chain_id)}")


if __name__ == "__main__":
    main()
