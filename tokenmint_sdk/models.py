"""
Data models for the TokenMint SDK.
"""
from decimal import Decimal
from typing import Dict, Any, Optional, List, Union
from pydantic import BaseModel, ConfigDict, Field


class ProductDescriptor(BaseModel):
    """Product attributes sent to the metadata service"""
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model_product: str = Field(..., alias="modelProduct")
    color_product: str = Field(..., alias="colorProduct")
    wheels_product: str = Field(..., alias="wheelsProduct")
    product_price: Union[int, float, str] = Field(..., alias="ProductPrice")
    total_price_product: Union[int, float, str] = Field(..., alias="totalPriceProduct")
    prompt: str = ""

    def to_payload(self) -> Dict[str, Any]:
        """Serialize with the field names the service expects"""
        return self.model_dump(by_alias=True)


class TransactionRequest(BaseModel):
    """
    A single mint or purchase request.

    ``amount`` is passed to ``createNft`` as-is and scaled to base units
    for ``buy``.
    """
    amount: Decimal = Field(..., ge=0)
    recipient: str
    has_referral: bool = False
    referral_code: str = ""
    descriptor: Optional[ProductDescriptor] = None


class ListedToken(BaseModel):
    """Decoded ``idToListedToken`` record"""
    token_id: int
    token_uri: str
    fields: Dict[str, Any] = Field(default_factory=dict)


class TokenMetadata(BaseModel):
    """Off-chain JSON metadata for a minted token"""
    model_config = ConfigDict(extra="allow")

    image: str


class TxReceipt(BaseModel):
    """Transaction receipt from the blockchain"""
    model_config = ConfigDict(populate_by_name=True)

    tx_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    block_hash: str = Field(..., alias="blockHash")
    status: int
    gas_used: int = Field(..., alias="gasUsed")
    from_address: str = Field(..., alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    logs: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == 1
