"""
Physical constants and particle bookkeeping values.
"""

from scipy import constants as sc

# Physical constants
ELEMENTARY_CHARGE = sc.e  # C
GRAVITY_ACCELERATION = sc.g  # m/s²
NEUTRON_MASS_KG = sc.m_n  # kg
PROTON_MASS_KG = sc.m_p  # kg
ELECTRON_MASS_KG = sc.m_e  # kg

# Magnetic moments (J/T)
NEUTRON_MAGNETIC_MOMENT = sc.physical_constants["neutron mag. mom."][0]
PROTON_MAGNETIC_MOMENT = sc.physical_constants["proton mag. mom."][0]
ELECTRON_MAGNETIC_MOMENT = sc.physical_constants["electron mag. mom."][0]

# Particle type names accepted in the SOURCE line
NAME_NEUTRON = "neutron"
NAME_PROTON = "proton"
NAME_ELECTRON = "electron"

# Particle status values
STATUS_INITIAL = "initial"
STATUS_INITIAL_NOT_FOUND = "initial_not_found"

# Debug flag
DEBUG = False
