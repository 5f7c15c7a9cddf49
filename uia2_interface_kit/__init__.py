# uia2_interface_kit/__init__.py
# Keep the package light: importing device.py connects to uiautomator2, so
# import DeviceAdapter / Uia2Interface from their modules explicitly.
