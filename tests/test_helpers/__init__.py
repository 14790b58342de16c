from .client_creator import (
    create_test_connection, create_test_proxy, make_receipt,
    TEST_RPC_URL, TEST_SERVICE_URL, TEST_SERVICE_TOKEN, TEST_PRIV_KEY,
    TEST_CONTRACT, TEST_USER, TEST_TX_HASH
)
