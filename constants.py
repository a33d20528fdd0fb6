# von Karman constant
KARMAN = 0.4

# acceleration of gravity ~ m/s^2
G = 9.8

# 0 degC in Kelvin
RT0 = 273.15

# triple point of water ~ K
RT0_TRIPLE = 273.16

# Stefan-Boltzmann constant ~ W/m^2/K^4
STEBOL = 5.67e-8

# standard sea-level pressure ~ Pa
PATM = 101000.

# dry air gas constant     ~ J/K/kg
RDAIR = 287.05

# water vapor gas constant ~ J/K/kg
RWV = 461.495

# RDAIR/RWV (~0.622)
REPS0 = RDAIR / RWV

# (1 - REPS0)/REPS0 (~0.608), virtual temperature constant
RCTV0 = (1. - REPS0) / REPS0

# specific heat of dry air   ~ J/kg/K
CPDAIR = 1005.0

# specific heat of water vap ~ J/kg/K
CPWV = 1860.0

# latent heat of sublimation ~ J/kg
LATSUB = 2.839e6

# latent heat of evaporation at 0 degC ~ J/kg
LATVAP = 2.501e6

# longwave emissivity of sea water and of sea-ice
EMISS_W = 0.98
EMISS_I = 0.996

# shortwave albedo of the ocean and of sea-ice
OCEAN_ALBEDO = 0.066
ICE_ALBEDO = 0.6

# reduction of saturation humidity over salty water
RDCT_QSAT_SALT = 0.98

# reference density of air ~ kg/m^3
RHO0_A = 1.2

# sea water: density ~ kg/m^3, specific heat ~ J/kg/K,
# kinematic viscosity ~ m^2/s, thermal conductivity ~ W/m/K
RHO0_W = 1025.
CP0_W = 4190.
NU0_W = 1.e-6
K0_W = 0.6

# reference height (m)
ZREF = 10.0

# reference height for air T (m)
ZTREF = 2.0

# default number of iterations of the bulk algorithms
NB_ITT = 5

# heights closer than this are considered equal (m)
DZ_EQUAL = 0.01

# smallest magnitudes allowed for air-sea differences of pot. temperature (K)
# and of specific humidity (kg/kg)
DT_MIN = 1.e-6
DQ_MIN = 1.e-9

# bounds for the inverse of the Obukhov length (1/m) and for zeta in psi functions
LINV_MAX = 200.
ZETA_MAX_ECMWF = 5.
ZETA_MAX_NCAR = 10.

# --- ECMWF (IFS Cy45r1) bulk parameters ---

# Charnock constant
CHARN0_ECMWF = 0.018

# scale height of the atmospheric boundary layer (m)
ZI0 = 1000.

# gustiness parameter
BETA0 = 1.

# smooth surface coefficients of the roughness lengths
ALPHA_M = 0.11
ALPHA_H = 0.40
ALPHA_Q = 0.62

# minimum bulk wind speed ~ (m/s)
UBLK_MIN = 0.2

# first guess of the gustiness contribution ~ (m/s)
WGUST0 = 0.5

# --- NCAR (Large & Yeager) bulk parameters ---

# minimum atm. wind speed over ocean surface ~ (m/s)
UMIN_O = 0.5

# neutral 10m wind above which Cd_n10 is held constant ~ (m/s)
UMAX_CDN = 33.

# --- cool-skin / warm-layer ---

# first guess of the cool-skin SST increment (K)
DT_CS0 = -0.25

# warm-layer depth (m) and profile shape parameter
RD0 = 3.
NU_WL = 0.3

# maximum thickness of the cool-skin sublayer (m)
DELTA_SKIN_MAX = 0.01
