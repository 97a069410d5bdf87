from ._BackplaneConfig import BackplaneConfig
