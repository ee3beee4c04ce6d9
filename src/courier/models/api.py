"""Courier v1 API request and reply models."""

from pydantic import BaseModel, ConfigDict, Field


class Reply(BaseModel):
    """
    Generic JSON reply, used for every error response.

    Example:
        {"success": false, "error": "missing password in request"}
    """

    success: bool = Field(default=False, description="Whether the request succeeded")
    error: str | None = Field(default=None, description="Error message")


class StatusReply(BaseModel):
    """Server status, uptime and version."""

    status: str = Field(..., description="ok, maintenance or stopping")
    uptime: str | None = Field(default=None, description="Time since server start")
    version: str | None = Field(default=None, description="Server version")


class StoreCertificateRequest(BaseModel):
    """
    Request to store a PKCS#12 certificate.

    Attributes:
        id: Certificate id, used to look up the stored password
        no_decrypt: Store the certificate as received without decrypting it
        base64_certificate: Standard base64 encoding of the PKCS#12 bundle
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"id": "1234", "no_decrypt": False, "base64_certificate": "MIIK..."}
        }
    )

    id: str = Field(default="", description="Certificate id")
    no_decrypt: bool = Field(default=False, description="Skip decryption")
    base64_certificate: str = Field(
        default="", description="Base64 encoded PKCS#12 certificate"
    )


class StorePasswordRequest(BaseModel):
    """Request to store the PKCS#12 password for a certificate."""

    id: str = Field(default="", description="Certificate id")
    password: str = Field(default="", description="PKCS#12 password")
