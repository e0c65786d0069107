"""Versioned System Info decoders.

Each schema version is a plain function that populates a ``SystemInfo``
record from the ``system`` JSON node. A newer version always calls the
previous one first and then adds the fields it introduced, so every
document of an older version decodes exactly as before.
"""

from enum import IntEnum
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional

from system_info import definitions as d
from system_info.kernel.coercion import (
    get_value,
    iter_elements,
    iter_entries,
    node_exists,
    parse_cu_mask,
    parse_luid,
    parse_packaging_version,
)
from system_info.kernel.models import (
    AsicInfo,
    ClockInfo,
    ConfigInfo,
    CpuInfo,
    DevDriverInfo,
    DriverInfo,
    EtwSupportInfo,
    ExcludedRangeInfo,
    GpuInfo,
    HeapInfo,
    IdInfo,
    MemoryInfo,
    OsInfo,
    OsMemoryInfo,
    PciInfo,
    Process,
    SoftwareVersion,
    SystemInfo,
    Version,
)


class SchemaVersion(IntEnum):
    """System Info schema versions this reader can decode."""
    V1 = 1
    V2 = 2


def read_version(system_node: Any) -> Version:
    """Resolve the schema version of a ``system`` node.

    Version 2+ documents carry a ``version`` object whose missing major
    defaults to 2. Legacy documents carry a bare integer, or nothing at all,
    which is read as the major version with a default of 1.
    """
    version_node = system_node.get(d.NODE_VERSION) if isinstance(system_node, dict) else None
    if isinstance(version_node, dict):
        return Version(
            major=get_value(version_node, d.NODE_MAJOR, 2),
            minor=get_value(version_node, d.NODE_MINOR, 0),
            patch=get_value(version_node, d.NODE_PATCH, 0),
            build=get_value(version_node, d.NODE_BUILD, 0),
        )
    return Version(major=get_value(system_node, d.NODE_VERSION, 1))


# ---------------------------------------------------------------------------
# Version 1
# ---------------------------------------------------------------------------

def _process_dev_driver_node(dev_driver_root: Any) -> DevDriverInfo:
    dev_driver = DevDriverInfo()
    if node_exists(dev_driver_root, d.NODE_VERSION):
        version_root = dev_driver_root[d.NODE_VERSION]
        dev_driver.major_version = get_value(version_root, d.NODE_MAJOR, 0)
    dev_driver.tag = get_value(dev_driver_root, d.NODE_TAG, "")
    return dev_driver


def _process_driver_node(driver_root: Any) -> DriverInfo:
    driver = DriverInfo(
        name=get_value(driver_root, d.NODE_NAME, ""),
        description=get_value(driver_root, d.NODE_DESCRIPTION, ""),
        software_version=get_value(driver_root, d.NODE_DRIVER_SOFTWARE_VERSION, ""),
        packaging_version=get_value(driver_root, d.NODE_DRIVER_PACKAGING_VERSION, ""),
        is_closed_source=get_value(driver_root, d.NODE_IS_CLOSED_SOURCE, False),
    )
    major, minor = parse_packaging_version(driver.packaging_version)
    driver.packaging_version_major = major
    driver.packaging_version_minor = minor
    return driver


def _process_os_memory_node(memory_root: Any) -> OsMemoryInfo:
    return OsMemoryInfo(
        physical=get_value(memory_root, d.NODE_MEMORY_PHYSICAL, 0, bits=64),
        swap=get_value(memory_root, d.NODE_MEMORY_SWAP, 0, bits=64),
        type=get_value(memory_root, d.NODE_NAME, ""),
    )


def _process_etw_node(etw_root: Any) -> EtwSupportInfo:
    return EtwSupportInfo(
        is_supported=get_value(etw_root, d.NODE_SUPPORTED, False),
        has_permission=get_value(etw_root, d.NODE_HAS_PERMISSION, False),
        status_code=get_value(etw_root, d.NODE_STATUS_CODE, 0),
        needs_rgp_registry_or_usergroup=get_value(etw_root, d.NODE_ETW_REGISTRY_OR_USER_GROUP, False),
    )


def _process_config_node(config_root: Any) -> ConfigInfo:
    """Process the Linux and Windows sections of the OS config node.

    Both platforms populate the same ConfigInfo; a document normally
    carries only one of them.
    """
    config = ConfigInfo()

    if node_exists(config_root, d.NODE_LINUX):
        linux_root = config_root[d.NODE_LINUX]
        config.power_dpm_writable = get_value(linux_root, d.NODE_POWER_DPM_WRITABLE, False)

        if node_exists(linux_root, d.NODE_DRM):
            drm_root = linux_root[d.NODE_DRM]
            config.drm_major_version = get_value(drm_root, d.NODE_MAJOR, 0)
            config.drm_minor_version = get_value(drm_root, d.NODE_MINOR, 0)

    if node_exists(config_root, d.NODE_WINDOWS):
        windows_root = config_root[d.NODE_WINDOWS]
        if node_exists(windows_root, d.NODE_ETW_SUPPORT):
            config.etw_support_info = _process_etw_node(windows_root[d.NODE_ETW_SUPPORT])

    return config


def _process_os_node(os_root: Any) -> OsInfo:
    os_info = OsInfo(
        name=get_value(os_root, d.NODE_NAME, ""),
        desc=get_value(os_root, d.NODE_DESCRIPTION, ""),
        hostname=get_value(os_root, d.NODE_HOSTNAME, ""),
    )
    if node_exists(os_root, d.NODE_MEMORY):
        os_info.memory = _process_os_memory_node(os_root[d.NODE_MEMORY])
    if node_exists(os_root, d.NODE_CONFIG):
        os_info.config = _process_config_node(os_root[d.NODE_CONFIG])
    return os_info


def _process_cpus_node(cpus_root: Any) -> List[CpuInfo]:
    cpus = []
    for cpu_node in iter_elements(cpus_root):
        cpu = CpuInfo(
            name=get_value(cpu_node, d.NODE_NAME, ""),
            architecture=get_value(cpu_node, d.NODE_ARCHITECTURE, ""),
            cpu_id=get_value(cpu_node, d.NODE_CPU_ID, ""),
            device_id=get_value(cpu_node, d.NODE_CPU_DEVICE_ID, ""),
            vendor_id=get_value(cpu_node, d.NODE_CPU_VENDOR_ID, ""),
            virtualization=get_value(cpu_node, d.NODE_VIRTUALIZATION, ""),
            num_logical_cores=get_value(cpu_node, d.NODE_CPU_LOGICAL_CORE_COUNT, 0),
            num_physical_cores=get_value(cpu_node, d.NODE_CPU_PHYSICAL_CORE_COUNT, 0),
            timestamp_clock_frequency=get_value(cpu_node, d.NODE_CPU_TIME_CLOCK_FREQ, 0, bits=64),
        )
        if node_exists(cpu_node, d.NODE_SPEED):
            cpu.max_clock_speed = get_value(cpu_node[d.NODE_SPEED], d.NODE_MAX, 0)
        cpus.append(cpu)
    return cpus


def _process_pci_node(pci_root: Any) -> PciInfo:
    return PciInfo(
        bus=get_value(pci_root, d.NODE_PCI_BUS, 0),
        device=get_value(pci_root, d.NODE_DEVICE, 0),
        function=get_value(pci_root, d.NODE_PCI_FUNCTION, 0),
    )


def _process_clock_node(clock_root: Any) -> ClockInfo:
    return ClockInfo(
        min=get_value(clock_root, d.NODE_MIN, 0, bits=64),
        max=get_value(clock_root, d.NODE_MAX, 0, bits=64),
    )


def _process_asic_ids_node(ids_root: Any) -> IdInfo:
    return IdInfo(
        gfx_engine=get_value(ids_root, d.NODE_ASIC_GFX_ENGINE, 0),
        family=get_value(ids_root, d.NODE_ASIC_FAMILY, 0),
        e_rev=get_value(ids_root, d.NODE_ASIC_E_REV, 0),
        revision=get_value(ids_root, d.NODE_ASIC_REVISION, 0),
        device=get_value(ids_root, d.NODE_DEVICE, 0),
        subsystem=get_value(ids_root, d.NODE_ASIC_SUBSYSTEM, 0),
        vendor=get_value(ids_root, d.NODE_ASIC_VENDOR, 0),
        luid=parse_luid(get_value(ids_root, d.NODE_ASIC_LUID, "")),
    )


def _process_asic_node(asic_root: Any) -> AsicInfo:
    asic = AsicInfo(
        gpu_index=get_value(asic_root, d.NODE_ASIC_GPU_INDEX, d.GPU_INDEX_UNKNOWN),
        gpu_counter_freq=get_value(asic_root, d.NODE_ASIC_GPU_COUNTER_FREQUENCY, 0),
        num_shader_engines=get_value(asic_root, d.NODE_ASIC_NUM_SE, 0),
        num_shader_arrays_per_engine=get_value(asic_root, d.NODE_ASIC_NUM_SA_PER_SE, 0),
        num_cus=get_value(asic_root, d.NODE_ASIC_NUM_CUS, 0),
    )
    if node_exists(asic_root, d.NODE_ASIC_CU_MASK):
        asic.cu_mask = parse_cu_mask(asic_root[d.NODE_ASIC_CU_MASK])
    if node_exists(asic_root, d.NODE_ASIC_ENGINE_CLOCK_SPEED):
        asic.engine_clock_hz = _process_clock_node(asic_root[d.NODE_ASIC_ENGINE_CLOCK_SPEED])
    if node_exists(asic_root, d.NODE_ASIC_IDS):
        asic.id_info = _process_asic_ids_node(asic_root[d.NODE_ASIC_IDS])
    return asic


def _process_heaps_node(heaps_root: Any) -> List[HeapInfo]:
    # The heap type is the entry's key, not a field of the entry.
    return [
        HeapInfo(
            heap_type=heap_type,
            phys_addr=get_value(heap_node, d.NODE_PHYSICAL_ADDRESS, 0, bits=64),
            size=get_value(heap_node, d.NODE_SIZE, 0, bits=64),
        )
        for heap_type, heap_node in iter_entries(heaps_root, d.NODE_HEAPS)
    ]


def _process_excluded_va_ranges_node(ranges_root: Any) -> List[ExcludedRangeInfo]:
    return [
        ExcludedRangeInfo(
            base=get_value(range_node, d.NODE_BASE, 0, bits=64),
            size=get_value(range_node, d.NODE_SIZE, 0, bits=64),
        )
        for range_node in iter_elements(ranges_root)
    ]


def _process_gpu_memory_node(memory_root: Any) -> MemoryInfo:
    memory = MemoryInfo(
        type=get_value(memory_root, d.NODE_TYPE, ""),
        mem_ops_per_clock=get_value(memory_root, d.NODE_MEMORY_OPS_PER_CLOCK, 0),
        bus_bit_width=get_value(memory_root, d.NODE_MEMORY_BUS_BIT_WIDTH, 0),
        bandwidth=get_value(memory_root, d.NODE_MEMORY_BANDWIDTH, 0, bits=64),
    )
    if node_exists(memory_root, d.NODE_MEMORY_CLOCK_SPEED):
        memory.mem_clock_hz = _process_clock_node(memory_root[d.NODE_MEMORY_CLOCK_SPEED])
    if node_exists(memory_root, d.NODE_HEAPS):
        memory.heaps = _process_heaps_node(memory_root[d.NODE_HEAPS])
    if node_exists(memory_root, d.NODE_EXCLUDED_VA_RANGES):
        memory.excluded_va_ranges = _process_excluded_va_ranges_node(memory_root[d.NODE_EXCLUDED_VA_RANGES])
    return memory


def _process_software_version_node(version_root: Any) -> SoftwareVersion:
    return SoftwareVersion(
        major=get_value(version_root, d.NODE_MAJOR, 0),
        minor=get_value(version_root, d.NODE_MINOR, 0),
        misc=get_value(version_root, d.NODE_MISC, 0),
    )


def _process_gpus_node(gpus_root: Any) -> List[GpuInfo]:
    gpus = []
    for gpu_node in iter_elements(gpus_root):
        gpu = GpuInfo(name=get_value(gpu_node, d.NODE_NAME, ""))
        if node_exists(gpu_node, d.NODE_PCI):
            gpu.pci = _process_pci_node(gpu_node[d.NODE_PCI])
        if node_exists(gpu_node, d.NODE_ASIC):
            gpu.asic = _process_asic_node(gpu_node[d.NODE_ASIC])
        if node_exists(gpu_node, d.NODE_MEMORY):
            gpu.memory = _process_gpu_memory_node(gpu_node[d.NODE_MEMORY])
        if node_exists(gpu_node, d.NODE_BIG_SW):
            gpu.big_sw = _process_software_version_node(gpu_node[d.NODE_BIG_SW])
        gpus.append(gpu)
    return gpus


def decode_v1(system_node: Any, system_info: SystemInfo) -> None:
    """Populate ``system_info`` with the fields of a version 1 document."""
    if node_exists(system_node, d.NODE_DEV_DRIVER):
        system_info.devdriver = _process_dev_driver_node(system_node[d.NODE_DEV_DRIVER])
    if node_exists(system_node, d.NODE_DRIVER):
        system_info.driver = _process_driver_node(system_node[d.NODE_DRIVER])
    if node_exists(system_node, d.NODE_OS):
        system_info.os = _process_os_node(system_node[d.NODE_OS])
    if node_exists(system_node, d.NODE_CPUS):
        system_info.cpus = _process_cpus_node(system_node[d.NODE_CPUS])
    if node_exists(system_node, d.NODE_GPUS):
        system_info.gpus = _process_gpus_node(system_node[d.NODE_GPUS])


# ---------------------------------------------------------------------------
# Version 2: adds the running process list
# ---------------------------------------------------------------------------

def _process_process_list_node(process_list_root: Any) -> List[Process]:
    return [
        Process(
            name=get_value(process_node, d.NODE_NAME, ""),
            path=get_value(process_node, d.NODE_PATH, ""),
            id=get_value(process_node, d.NODE_PROCESS_ID, 0),
        )
        for process_node in iter_elements(process_list_root)
    ]


def decode_v2(system_node: Any, system_info: SystemInfo) -> None:
    """Populate ``system_info`` with the fields of a version 2 document."""
    decode_v1(system_node, system_info)

    if node_exists(system_node, d.NODE_PROCESSES):
        system_info.processes = _process_process_list_node(system_node[d.NODE_PROCESSES])


Decoder = Callable[[Any, SystemInfo], None]

DECODERS: Mapping[SchemaVersion, Decoder] = MappingProxyType({
    SchemaVersion.V1: decode_v1,
    SchemaVersion.V2: decode_v2,
})


def select_decoder(major: int) -> Optional[SchemaVersion]:
    """Select the schema version for a major version number, or None if unknown."""
    try:
        return SchemaVersion(major)
    except ValueError:
        return None


def decode_system_node(system_node: Any, system_info: SystemInfo) -> bool:
    """Resolve the version of ``system_node`` and decode it into ``system_info``.

    Returns:
        False if the schema version is not supported (``system_info`` is left
        untouched), True otherwise.

    Raises:
        SystemInfoDecodeError: If a field has the wrong JSON type.
    """
    version = read_version(system_node)
    schema_version = select_decoder(version.major)
    if schema_version is None:
        return False

    system_info.version = version
    DECODERS[schema_version](system_node, system_info)
    return True
