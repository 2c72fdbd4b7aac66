# relay_pulse/protocols/modbus/coil_channel.py
"""
Modbus RTU coil channel using pymodbus 3.11

Transport-only channel bound to one slave.
Two transactions: read coils (FC 01) and write single coil (FC 05).
No cached coil state.
"""

from dataclasses import dataclass

from pymodbus.client import AsyncModbusSerialClient
from pymodbus.exceptions import ModbusException

from relay_pulse.errors import (
    ChannelConnectionError,
    RelayConfigError,
    TransactionError,
)
from relay_pulse.logging_system import EventCategory, EventSeverity, get_logger

# Coils returned by one read, starting at address 0
BANK_SIZE = 8

MAX_SLAVE_ID = 255

logger = get_logger(__name__)


@dataclass(frozen=True)
class SerialLink:
    """Physical RS-485 transport settings."""

    port: str
    baudrate: int = 9600
    bytesize: int = 8
    parity: str = "N"
    stopbits: int = 1
    timeout: float = 1.0  # per-transaction, enforced by pymodbus


class CoilChannel:
    def __init__(self, link: SerialLink, slave_id: int):
        if not 0 <= slave_id <= MAX_SLAVE_ID:
            raise RelayConfigError(
                f"Slave address {slave_id} out of range 0-{MAX_SLAVE_ID}"
            )

        self.link = link
        self.slave_id = slave_id

        self.client: AsyncModbusSerialClient | None = None
        self.connected: bool = False

    @classmethod
    async def open(cls, link: SerialLink, slave_id: int) -> "CoilChannel":
        """Create a channel and connect it, raising ChannelConnectionError on failure."""
        channel = cls(link, slave_id)
        await channel.connect()
        return channel

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------
    async def connect(self) -> bool:
        if not self.client:
            self.client = AsyncModbusSerialClient(
                port=self.link.port,
                baudrate=self.link.baudrate,
                bytesize=self.link.bytesize,
                parity=self.link.parity,
                stopbits=self.link.stopbits,
                timeout=self.link.timeout,
                retries=0,
            )

        if not self.connected:
            try:
                self.connected = bool(await self.client.connect())
            except (ModbusException, OSError) as e:
                await self.close()
                raise ChannelConnectionError(self.link.port, str(e)) from e

            if not self.connected:
                await self.close()
                raise ChannelConnectionError(self.link.port)

            logger.log_event(
                EventSeverity.INFO,
                EventCategory.COMMUNICATION,
                f"Connected to slave {self.slave_id} on {self.link.port} "
                f"at {self.link.baudrate} baud",
            )

        return self.connected

    async def close(self) -> None:
        if self.client:
            self.client.close()
            self.client = None
            logger.debug(f"Closed serial link {self.link.port}")

        self.connected = False

    async def __aenter__(self) -> "CoilChannel":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Modbus RTU primitives
    # ------------------------------------------------------------------
    async def read_coils(self, start: int = 0, count: int = BANK_SIZE) -> list[bool]:
        if not self.client or not self.connected:
            raise TransactionError("read_coils", start, "client not connected")

        try:
            result = await self.client.read_coils(
                start, count=count, device_id=self.slave_id
            )
        except ModbusException as e:
            raise TransactionError("read_coils", start, str(e)) from e

        if result.isError():
            raise TransactionError("read_coils", start, f"error response {result}")

        bits = list(result.bits)
        if len(bits) < count:
            raise TransactionError(
                "read_coils", start, f"short response: {len(bits)} of {count} coils"
            )

        logger.debug(f"read_coils({start}, {count}) -> {bits[:count]}")
        return [bool(bit) for bit in bits[:count]]

    async def write_coil(self, index: int, value: bool) -> None:
        if not self.client or not self.connected:
            raise TransactionError("write_coil", index, "client not connected")

        try:
            result = await self.client.write_coil(
                index, value, device_id=self.slave_id
            )
        except ModbusException as e:
            raise TransactionError("write_coil", index, str(e)) from e

        if result.isError():
            raise TransactionError("write_coil", index, f"error response {result}")

        logger.debug(f"write_coil({index}, {value}) acknowledged")

    # ------------------------------------------------------------------
    # Transport-level introspection only
    # ------------------------------------------------------------------
    async def probe(self) -> dict:
        return {
            "transport": "modbus-rtu",
            "port": self.link.port,
            "slave_id": self.slave_id,
            "baudrate": self.link.baudrate,
            "connected": self.connected,
        }
