"""Raw API response types for the kubelet summary API.

Pydantic models mirroring the kubelet ``stats/v1alpha1`` summary schema.
Fields are snake_case in Python and camelCase on the wire. Values are
carried as reported by the kubelet; nothing here interprets them.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt
from pydantic.alias_generators import to_camel


class _StatsModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CPUStats(_StatsModel):
    """CPU usage of a node, pod or container."""

    time: datetime | None = None
    # Averaged over the sampling window, in nanocores
    usage_nano_cores: NonNegativeInt | None = None
    usage_core_nano_seconds: NonNegativeInt | None = None


class MemoryStats(_StatsModel):
    """Memory usage in bytes."""

    time: datetime | None = None
    available_bytes: NonNegativeInt | None = None
    usage_bytes: NonNegativeInt | None = None
    working_set_bytes: NonNegativeInt | None = None
    rss_bytes: NonNegativeInt | None = None
    page_faults: NonNegativeInt | None = None
    major_page_faults: NonNegativeInt | None = None


class InterfaceStats(_StatsModel):
    """Traffic counters of a single network interface."""

    name: str = ""
    rx_bytes: NonNegativeInt | None = None
    rx_errors: NonNegativeInt | None = None
    tx_bytes: NonNegativeInt | None = None
    tx_errors: NonNegativeInt | None = None


class NetworkStats(InterfaceStats):
    """Network usage.

    The top-level interface fields describe the default interface;
    ``interfaces`` lists every interface including the default one.
    """

    time: datetime | None = None
    interfaces: list[InterfaceStats] | None = None


class FsStats(_StatsModel):
    """Filesystem usage in bytes and inodes."""

    time: datetime | None = None
    available_bytes: NonNegativeInt | None = None
    capacity_bytes: NonNegativeInt | None = None
    used_bytes: NonNegativeInt | None = None
    inodes_free: NonNegativeInt | None = None
    inodes: NonNegativeInt | None = None
    inodes_used: NonNegativeInt | None = None


class RuntimeStats(_StatsModel):
    """Container runtime usage."""

    image_fs: FsStats | None = None


class RlimitStats(_StatsModel):
    """Process limits of the node."""

    time: datetime | None = None
    maxpid: int | None = None
    curproc: int | None = None


class AcceleratorStats(_StatsModel):
    """Usage of an accelerator (GPU) attached to a container."""

    make: str = ""
    model: str = ""
    id: str = ""
    memory_total: NonNegativeInt = 0
    memory_used: NonNegativeInt = 0
    # Percentage of time the accelerator was busy
    duty_cycle: NonNegativeInt = 0


class UserDefinedMetric(_StatsModel):
    """Custom metric exposed by a container."""

    name: str = ""
    type: str = ""
    units: str = ""
    time: datetime | None = None
    labels: dict[str, str] | None = None
    value: float = 0.0


class ContainerStats(_StatsModel):
    """Resource usage of a single container."""

    name: str = ""
    start_time: datetime | None = None
    cpu: CPUStats | None = None
    memory: MemoryStats | None = None
    accelerators: list[AcceleratorStats] | None = None
    rootfs: FsStats | None = None
    logs: FsStats | None = None
    user_defined_metrics: list[UserDefinedMetric] | None = None


class PVCReference(_StatsModel):
    """Persistent volume claim backing a volume."""

    name: str = ""
    namespace: str = ""


class VolumeStats(FsStats):
    """Filesystem usage of a pod volume."""

    name: str = ""
    pvc_ref: PVCReference | None = None


class PodReference(_StatsModel):
    """Identity of a pod."""

    name: str = ""
    namespace: str = ""
    uid: str = ""


class PodStats(_StatsModel):
    """Resource usage of a pod and its containers."""

    pod_ref: PodReference = Field(default_factory=PodReference)
    start_time: datetime | None = None
    containers: list[ContainerStats] | None = None
    cpu: CPUStats | None = None
    memory: MemoryStats | None = None
    network: NetworkStats | None = None
    volume: list[VolumeStats] | None = None
    ephemeral_storage: FsStats | None = Field(None, alias="ephemeral-storage")


class NodeStats(_StatsModel):
    """Resource usage of the node itself."""

    node_name: str = ""
    # kubelet, runtime, pods and misc system daemons
    system_containers: list[ContainerStats] | None = None
    start_time: datetime | None = None
    cpu: CPUStats | None = None
    memory: MemoryStats | None = None
    network: NetworkStats | None = None
    fs: FsStats | None = None
    runtime: RuntimeStats | None = None
    rlimit: RlimitStats | None = None


class Summary(_StatsModel):
    """Summary statistics reported by a kubelet at ``/stats/summary/``."""

    node: NodeStats = Field(default_factory=NodeStats)
    pods: list[PodStats] | None = Field(default_factory=list)
