"""Wire-schema keys and chunk constants for System Info documents.

The key strings are the stable JSON schema written by existing producers;
they must not change.
"""

# Chunk stored in RDF-style chunk files
SYSTEM_INFO_CHUNK_IDENTIFIER = "SystemInfo"
SYSTEM_INFO_CHUNK_VERSION = 1  # Current system info chunk version
SYSTEM_INFO_CHUNK_VERSION_MAX = SYSTEM_INFO_CHUNK_VERSION  # Newest chunk version this reader understands

# Sentinel for an ASIC whose enumeration index is unknown
GPU_INDEX_UNKNOWN = 0xFFFFFFFF

# Top level
NODE_SYSTEM = "system"
NODE_VERSION = "version"
NODE_MAJOR = "major"
NODE_MINOR = "minor"
NODE_PATCH = "patch"
NODE_BUILD = "build"
NODE_MISC = "misc"

# Shared
NODE_NAME = "name"
NODE_DESCRIPTION = "description"
NODE_TYPE = "type"
NODE_MEMORY = "memory"
NODE_DEVICE = "device"
NODE_MIN = "min"
NODE_MAX = "max"
NODE_SIZE = "size"
NODE_PATH = "path"

# Driver
NODE_DEV_DRIVER = "devdriver"
NODE_TAG = "tag"
NODE_DRIVER = "driver"
NODE_DRIVER_PACKAGING_VERSION = "packagingVersion"
NODE_DRIVER_SOFTWARE_VERSION = "softwareVersion"
NODE_IS_CLOSED_SOURCE = "isClosedSource"

# Operating system
NODE_OS = "os"
NODE_HOSTNAME = "hostname"
NODE_MEMORY_PHYSICAL = "physical"
NODE_MEMORY_SWAP = "swap"
NODE_CONFIG = "config"
NODE_LINUX = "linux"
NODE_POWER_DPM_WRITABLE = "powerDpmWritable"
NODE_DRM = "drm"
NODE_WINDOWS = "windows"
NODE_ETW_SUPPORT = "etwSupport"
NODE_SUPPORTED = "isSupported"
NODE_HAS_PERMISSION = "hasPermission"
NODE_STATUS_CODE = "statusCode"
NODE_ETW_REGISTRY_OR_USER_GROUP = "needsRegistryOrUserGroup"

# CPUs
NODE_CPUS = "cpus"
NODE_ARCHITECTURE = "architecture"
NODE_CPU_ID = "cpuId"
NODE_CPU_DEVICE_ID = "deviceId"
NODE_CPU_VENDOR_ID = "vendorId"
NODE_VIRTUALIZATION = "virtualization"
NODE_CPU_PHYSICAL_CORE_COUNT = "numPhysicalCores"
NODE_CPU_LOGICAL_CORE_COUNT = "numLogicalCores"
NODE_SPEED = "speed"
NODE_CPU_TIME_CLOCK_FREQ = "cpuTimeClockFreq"

# GPUs
NODE_GPUS = "gpus"
NODE_PCI = "pci"
NODE_PCI_BUS = "bus"
NODE_PCI_FUNCTION = "function"
NODE_ASIC = "asic"
NODE_ASIC_GPU_INDEX = "gpuIndex"
NODE_ASIC_GPU_COUNTER_FREQUENCY = "gpuCounterFreq"
NODE_ASIC_NUM_SE = "numShaderEngines"
NODE_ASIC_NUM_SA_PER_SE = "numShaderArraysPerEngine"
NODE_ASIC_CU_MASK = "cuMask"
NODE_ASIC_NUM_CUS = "numCus"
NODE_ASIC_ENGINE_CLOCK_SPEED = "engineClockHz"
NODE_ASIC_IDS = "ids"
NODE_ASIC_GFX_ENGINE = "gfxEngine"
NODE_ASIC_FAMILY = "family"
NODE_ASIC_E_REV = "eRev"
NODE_ASIC_REVISION = "revision"
NODE_ASIC_SUBSYSTEM = "subsystem"
NODE_ASIC_VENDOR = "vendor"
NODE_ASIC_LUID = "luid"
NODE_MEMORY_OPS_PER_CLOCK = "memOpsPerClock"
NODE_MEMORY_BUS_BIT_WIDTH = "busBitWidth"
NODE_MEMORY_BANDWIDTH = "bandwidthBytesPerSec"
NODE_MEMORY_CLOCK_SPEED = "memClockHz"
NODE_HEAPS = "heaps"
NODE_PHYSICAL_ADDRESS = "physicalAddress"
NODE_EXCLUDED_VA_RANGES = "excludedVaRanges"
NODE_BASE = "base"
NODE_BIG_SW = "bigSw"

# Processes (schema version 2+)
NODE_PROCESSES = "processes"
NODE_PROCESS_ID = "processId"
