"""
Request, result and retry option types for JSON-RPC calls
"""

from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence

from ..config import config as global_config
from ..errors import ConfigurationError


@dataclass
class RpcRequest:
    """
    Single JSON-RPC request

    Attributes:
        method: RPC method name
        params: Positional parameters
        id: Request id, unique within a batch (assigned by position when None)
    """
    method: str
    params: List[Any] = field(default_factory=list)
    id: Optional[int] = None

    def to_payload(self, request_id: int) -> dict:
        return {
            "jsonrpc": "2.0",
            "method": self.method,
            "params": list(self.params),
            "id": request_id,
        }


@dataclass
class RpcResult:
    """
    Outcome of one request inside a batch

    A failed item is data, never an exception: the rest of the batch
    is unaffected.
    """
    success: bool
    value: Any = None
    error: Optional[str] = None
    code: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, value: Any) -> "RpcResult":
        """Create successful result"""
        return cls(success=True, value=value)

    @classmethod
    def failed(cls, error: str, code: Optional[int] = None) -> "RpcResult":
        """Create failed result"""
        return cls(success=False, error=error, code=code)


@dataclass(frozen=True)
class RetryOptions:
    """
    Retry policy for one RPC operation

    Unset fields are filled from the global config (config.rpc).

    Usage:
        # All defaults from environment
        opts = RetryOptions()

        # Override the attempt count only
        opts = RetryOptions.with_retries(5)

        # Tighter per-attempt timeout
        opts = RetryOptions(timeout_ms=2_000)
    """
    retries: Optional[int] = None
    base_delay_ms: Optional[float] = None
    timeout_ms: Optional[float] = None
    jitter_min: Optional[float] = None
    jitter_max: Optional[float] = None
    max_delay_ms: Optional[float] = None

    def __post_init__(self):
        """Apply defaults from global config for any unset values"""
        rpc = global_config.rpc
        defaults = {
            "retries": rpc.max_retries,
            "base_delay_ms": rpc.base_delay_ms,
            "timeout_ms": rpc.timeout_ms,
            "jitter_min": rpc.jitter_min,
            "jitter_max": rpc.jitter_max,
            "max_delay_ms": rpc.max_delay_ms,
        }
        for name, default in defaults.items():
            if getattr(self, name) is None:
                object.__setattr__(self, name, default)

        if self.base_delay_ms <= 0:
            raise ConfigurationError.invalid("base_delay_ms", f"must be > 0, got {self.base_delay_ms}")
        if self.timeout_ms <= 0:
            raise ConfigurationError.invalid("timeout_ms", f"must be > 0, got {self.timeout_ms}")
        if not 0 <= self.jitter_min <= self.jitter_max:
            raise ConfigurationError.invalid(
                "jitter",
                f"need 0 <= jitter_min <= jitter_max, got {self.jitter_min}..{self.jitter_max}",
            )
        if self.max_delay_ms < 0:
            raise ConfigurationError.invalid("max_delay_ms", f"must be >= 0, got {self.max_delay_ms}")

    @property
    def attempts(self) -> int:
        """Total number of attempts, never less than one"""
        return max(1, self.retries)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @classmethod
    def with_retries(cls, retries: int) -> "RetryOptions":
        """Default policy with only the attempt count overridden"""
        return cls(retries=retries)

    def replace(self, **changes) -> "RetryOptions":
        return replace(self, **changes)


@dataclass(frozen=True)
class ContractCallRequest:
    """
    Read-only contract call

    Attributes:
        contract: Contract address (0x-hex or base58check)
        signature: Canonical function signature, e.g. "balanceOf(address)"
        args: Argument values, one per type in the signature
    """
    contract: str
    signature: str
    args: Sequence[Any] = ()
