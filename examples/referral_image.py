#!/usr/bin/env python3
"""
Print the image URL of the token behind a referral code.
"""
import logging
import sys

from tokenmint_sdk import ChainConnection, ContractProxy, MetadataClient, MintConfig, ReferralResolver


def main(ref_code: str = "GIE-7879"):
    logging.basicConfig(level=logging.INFO)

    config = MintConfig.from_env()
    connection = ChainConnection.from_config(config)
    if config.chain_id is not None:
        connection.assert_chain_id()
    contract = ContractProxy.from_config(connection, config)
    resolver = ReferralResolver(contract, MetadataClient(timeout=config.request_timeout))

    image = resolver.get_image_uri(ref_code)
    if image:
        print(image)


if __name__ == "__main__":
    main(*sys.argv[1:2])
