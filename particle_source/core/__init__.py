"""
粒子源核心模块

该子包包含粒子源的核心功能模块：
- constants: 物理常数和粒子状态
- errors: 异常类型
- data_classes: 数据结构定义（MeshGeometry, EmittingSurface, ParticleSettings）
- stl_utils: STL文件处理
- geometry: 网格处理、点在实体内判断
- mc: 随机数抽样
- fields: 场与势能
- particles: 粒子类型
- samplers: 体积抽样与发射面筛选
- sources: 面源与体源
- source_config: 配置文件与源的构建
- io_utils: 输入输出工具
"""

# 常数
from .constants import (
    NAME_NEUTRON,
    NAME_PROTON,
    NAME_ELECTRON,
    STATUS_INITIAL,
    STATUS_INITIAL_NOT_FOUND,
    DEBUG,
)

# 异常
from .errors import (
    SourceError,
    SourceConfigError,
    UnknownParticleError,
    SamplingExhaustedError,
)

# 数据类
from .data_classes import (
    MeshGeometry,
    EmittingSurface,
    ParticleSettings,
    SourceEntry,
    SpawnRecord,
)

# STL工具
from .stl_utils import load_stl_mesh, export_stl_mesh

# 几何处理
from .geometry import (
    prepare_mesh_geometry,
    merge_mesh_geometries,
    build_orthonormal_frame,
    rotate_to_normal,
    direction_to_angles,
    SolidIndex,
    load_solid,
    Geometry,
    load_geometry,
)

# 抽样
from .mc import MCGenerator

# 场
from .fields import FieldManager, UniformMagneticField, UniformElectricField

# 粒子
from .particles import Particle, Neutron, Proton, Electron, make_particle

# 发射区域
from .samplers import (
    CuboidSampler,
    CylindricalSectorSampler,
    SolidSampler,
    cylindrical_surface,
    solid_surface,
)

# 粒子源
from .sources import ParticleSource, SurfaceSource, VolumeSource, phase_space_weight

# 配置
from .source_config import (
    Source,
    SourceOptions,
    ExperimentConfig,
    build_source,
    parse_source_line,
    read_config,
)

# IO工具
from .io_utils import export_particles_to_csv, print_source_statistics

__all__ = [
    # 常数
    'NAME_NEUTRON',
    'NAME_PROTON',
    'NAME_ELECTRON',
    'STATUS_INITIAL',
    'STATUS_INITIAL_NOT_FOUND',
    'DEBUG',
    # 异常
    'SourceError',
    'SourceConfigError',
    'UnknownParticleError',
    'SamplingExhaustedError',
    # 数据类
    'MeshGeometry',
    'EmittingSurface',
    'ParticleSettings',
    'SourceEntry',
    'SpawnRecord',
    # STL
    'load_stl_mesh',
    'export_stl_mesh',
    # 几何
    'prepare_mesh_geometry',
    'merge_mesh_geometries',
    'build_orthonormal_frame',
    'rotate_to_normal',
    'direction_to_angles',
    'SolidIndex',
    'load_solid',
    'Geometry',
    'load_geometry',
    # 抽样
    'MCGenerator',
    # 场
    'FieldManager',
    'UniformMagneticField',
    'UniformElectricField',
    # 粒子
    'Particle',
    'Neutron',
    'Proton',
    'Electron',
    'make_particle',
    # 发射区域
    'CuboidSampler',
    'CylindricalSectorSampler',
    'SolidSampler',
    'cylindrical_surface',
    'solid_surface',
    # 粒子源
    'ParticleSource',
    'SurfaceSource',
    'VolumeSource',
    'phase_space_weight',
    # 配置
    'Source',
    'SourceOptions',
    'ExperimentConfig',
    'build_source',
    'parse_source_line',
    'read_config',
    # IO
    'export_particles_to_csv',
    'print_source_statistics',
]
