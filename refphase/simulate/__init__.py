from ._mosaic import hap_tracts, ref_panel, mosaic_geno, mask_geno

__all__ = ["hap_tracts", "ref_panel", "mosaic_geno", "mask_geno"]
