from tti_polyfill.adapters.cdp import CDPNetworkAdapter

__all__ = ['CDPNetworkAdapter']
