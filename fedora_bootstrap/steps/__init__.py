from .step_00_check_host import CheckHostStep
from .step_10_enable_rpmfusion import EnableRpmFusionStep
from .step_15_enable_flathub import EnableFlathubStep
from .step_20_enable_copr import EnableCoprStep
from .step_30_create_local_bin import CreateLocalBinStep
from .step_35_setup_helix_config import SetupHelixConfigStep
from .step_40_install_dev_tools import InstallDevToolsStep
from .step_45_install_packages import InstallPackagesStep
from .step_50_install_dra import InstallDraStep
from .step_55_install_dra_tools import InstallDraToolsStep
from .step_60_install_rust import InstallRustStep
from .step_70_setup_lazyvim import SetupLazyVimStep
from .step_75_install_broot import InstallBrootStep
from .step_80_install_dotfiles import InstallDotfilesStep
from .step_90_change_shell import ChangeShellStep

__all__ = [
    "CheckHostStep",
    "EnableRpmFusionStep",
    "EnableFlathubStep",
    "EnableCoprStep",
    "CreateLocalBinStep",
    "SetupHelixConfigStep",
    "InstallDevToolsStep",
    "InstallPackagesStep",
    "InstallDraStep",
    "InstallDraToolsStep",
    "InstallRustStep",
    "SetupLazyVimStep",
    "InstallBrootStep",
    "InstallDotfilesStep",
    "ChangeShellStep",
]
