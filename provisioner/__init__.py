"""deps-provisioner - 原生应用构建依赖准备工具"""

__version__ = "0.3.0"
