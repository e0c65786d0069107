"""System Info record models.

Every field has a zero/empty default so a freshly constructed
``SystemInfo()`` is the zero-valued record. Decoders fill these in place,
one subtree at a time, and never leave a field unset.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from system_info.definitions import GPU_INDEX_UNKNOWN

LUID_SIZE = 8


class Version(BaseModel):
    """System Info structure revision."""
    major: int = 0
    minor: int = 0
    patch: int = 0
    build: int = 0

    model_config = ConfigDict(extra="forbid")


class DevDriverInfo(BaseModel):
    """Developer Driver version info."""
    major_version: int = 0  # Interface major version
    tag: str = ""  # Release tag name

    model_config = ConfigDict(extra="forbid")


class DriverInfo(BaseModel):
    """GPU driver software info."""
    packaging_version_major: int = 0  # Derived from packaging_version
    packaging_version_minor: int = 0  # Derived from packaging_version
    name: str = ""
    description: str = ""
    packaging_version: str = ""
    software_version: str = ""  # Windows only
    is_closed_source: bool = False

    model_config = ConfigDict(extra="forbid")


class OsMemoryInfo(BaseModel):
    """System memory info."""
    physical: int = 0  # bytes
    swap: int = 0  # bytes
    type: str = ""

    model_config = ConfigDict(extra="forbid")


class EtwSupportInfo(BaseModel):
    """Event Tracing for Windows support."""
    is_supported: bool = False
    has_permission: bool = False  # Account may open an ETW session
    status_code: int = 0  # Status received when opening a session
    needs_rgp_registry_or_usergroup: bool = False

    model_config = ConfigDict(extra="forbid")


class ConfigInfo(BaseModel):
    """Platform specific configuration."""
    power_dpm_writable: bool = False  # Linux power management file is writable
    drm_major_version: int = 0
    drm_minor_version: int = 0
    etw_support_info: EtwSupportInfo = Field(default_factory=EtwSupportInfo)

    model_config = ConfigDict(extra="forbid")


class OsInfo(BaseModel):
    """Operating system info."""
    name: str = ""
    desc: str = ""
    hostname: str = ""
    memory: OsMemoryInfo = Field(default_factory=OsMemoryInfo)
    config: ConfigInfo = Field(default_factory=ConfigInfo)

    model_config = ConfigDict(extra="forbid")


class CpuInfo(BaseModel):
    """A single physical CPU package."""
    name: str = ""  # "AMD Ryzen 7 2700X Eight-Core Processor"
    cpu_id: str = ""  # "AMD64 Family 23 Model 8 Stepping 2"
    device_id: str = ""  # Slot id, "CPU0"
    architecture: str = ""
    vendor_id: str = ""  # "AuthenticAMD"
    virtualization: str = ""
    num_physical_cores: int = 0
    num_logical_cores: int = 0
    max_clock_speed: int = 0  # MHz
    timestamp_clock_frequency: int = 0  # Hz

    model_config = ConfigDict(extra="forbid")


class PciInfo(BaseModel):
    """PCI location of a GPU."""
    bus: int = 0
    device: int = 0
    function: int = 0

    model_config = ConfigDict(extra="forbid")


class ClockInfo(BaseModel):
    """Clock range in Hz."""
    min: int = 0
    max: int = 0

    model_config = ConfigDict(extra="forbid")


class IdInfo(BaseModel):
    """ASIC identification."""
    gfx_engine: int = 0
    family: int = 0
    e_rev: int = 0
    revision: int = 0  # PCI revision
    device: int = 0  # PCI device id
    subsystem: int = 0
    vendor: int = 0
    luid: bytes = bytes(LUID_SIZE)  # Locally unique identifier of the adapter

    model_config = ConfigDict(extra="forbid")

    @field_serializer("luid", when_used="json")
    def serialize_luid(self, luid: bytes) -> str:
        return luid.hex()


class AsicInfo(BaseModel):
    """Physical GPU hardware info."""
    gpu_index: int = GPU_INDEX_UNKNOWN
    gpu_counter_freq: int = 0
    engine_clock_hz: ClockInfo = Field(default_factory=ClockInfo)
    num_shader_engines: int = 0
    num_shader_arrays_per_engine: int = 0
    # Active CUs, indexed by shader engine then shader array
    cu_mask: List[List[int]] = Field(default_factory=list)
    num_cus: int = 0
    id_info: IdInfo = Field(default_factory=IdInfo)

    model_config = ConfigDict(extra="forbid")


class HeapInfo(BaseModel):
    """A GPU memory heap."""
    heap_type: str = ""  # Key of the heap entry, typically "local" or "invisible"
    phys_addr: int = 0
    size: int = 0

    model_config = ConfigDict(extra="forbid")


class ExcludedRangeInfo(BaseModel):
    """A reserved virtual address span."""
    base: int = 0
    size: int = 0

    model_config = ConfigDict(extra="forbid")


class MemoryInfo(BaseModel):
    """GPU memory info."""
    type: str = ""
    mem_ops_per_clock: int = 0
    bus_bit_width: int = 0
    bandwidth: int = 0  # bytes/second
    mem_clock_hz: ClockInfo = Field(default_factory=ClockInfo)
    heaps: List[HeapInfo] = Field(default_factory=list)
    excluded_va_ranges: List[ExcludedRangeInfo] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class SoftwareVersion(BaseModel):
    """Vendor software co-release version."""
    major: int = 0
    minor: int = 0
    misc: int = 0

    model_config = ConfigDict(extra="forbid")


class GpuInfo(BaseModel):
    """A single GPU device."""
    name: str = ""
    pci: PciInfo = Field(default_factory=PciInfo)
    asic: AsicInfo = Field(default_factory=AsicInfo)
    memory: MemoryInfo = Field(default_factory=MemoryInfo)
    big_sw: SoftwareVersion = Field(default_factory=SoftwareVersion)

    model_config = ConfigDict(extra="forbid")


class Process(BaseModel):
    """A running process."""
    name: str = ""
    path: str = ""
    id: int = 0

    model_config = ConfigDict(extra="forbid")


class SystemInfo(BaseModel):
    """Hardware and software inventory of the target system."""
    version: Version = Field(default_factory=Version)
    driver: DriverInfo = Field(default_factory=DriverInfo)
    devdriver: DevDriverInfo = Field(default_factory=DevDriverInfo)
    os: OsInfo = Field(default_factory=OsInfo)
    cpus: List[CpuInfo] = Field(default_factory=list)
    gpus: List[GpuInfo] = Field(default_factory=list)
    processes: List[Process] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")
