import refphase
from ._utils import log_params


def phase(
    panel: str,
    geno: str,
    typed: str,
    out: str,
    n_window: int = None,
    window_size: int = None,
    n_threads: int = 1,
    orientation_tie: str = "same",
    breakpoint_tie: str = "midpoint",
    lenient: bool = False,
    keep_typed: bool = False,
):
    """Phase and impute target genotypes against a reference panel

    Parameters
    ----------
    panel : str
        reference panel digit matrix, one haplotype per row
    geno : str
        target genotype digit matrix, one individual per row over the typed
        markers, `9` for missing
    typed : str
        reference marker index of each typed marker, one per line
    out : str
        output prefix: <out>.mosaic, <out>.geno and <out>.summary.tsv are written
    n_window : int
        number of windows
    window_size : int
        number of typed markers per window, alternative to `n_window`
    n_threads : int
        number of worker threads
    orientation_tie : str
        orientation kept on a tie: same or swap
    breakpoint_tie : str
        breakpoint offset kept on a tie: midpoint, left or right
    lenient : bool
        exclude samples that cannot be phased instead of failing the run
    keep_typed : bool
        restore observed typed genotypes in the imputed output
    """
    log_params("phase", locals())

    ref = refphase.io.read_panel(panel)
    target = refphase.io.read_geno(geno)
    typed_idx = refphase.io.read_typed_idx(typed)
    refphase.logger.info(
        f"Read panel n_snp x n_hap = {ref.shape[0]} x {ref.shape[1]}, "
        f"genotypes n_typed x n_indiv = {target.shape[0]} x {target.shape[1]}"
    )

    res = refphase.phase.phase(
        ref,
        target,
        typed_idx,
        n_window=n_window,
        window_size=window_size,
        n_threads=n_threads,
        orientation_tie=orientation_tie,
        breakpoint_tie=breakpoint_tie,
        strict=not lenient,
        keep_typed=keep_typed,
    )

    refphase.io.write_mosaic(f"{out}.mosaic", res.mosaic)
    refphase.io.write_geno(f"{out}.geno", res.geno)
    refphase.io.write_summary(f"{out}.summary.tsv", res.mosaic, res.failed)
    refphase.logger.info(f"Results written to {out}.[mosaic|geno|summary.tsv]")


def panel_stats(
    panel: str,
    typed: str,
    out: str,
    n_window: int = None,
    window_size: int = None,
):
    """Summarize how the reference panel compresses in each window

    Parameters
    ----------
    panel : str
        reference panel digit matrix, one haplotype per row
    typed : str
        reference marker index of each typed marker, one per line
    out : str
        path to the output .tsv file
    n_window : int
        number of windows
    window_size : int
        number of typed markers per window, alternative to `n_window`
    """
    log_params("panel_stats", locals())

    model = refphase.phase.RefPhaser(n_window=n_window, window_size=window_size)
    model.fit(refphase.io.read_panel(panel), refphase.io.read_typed_idx(typed))
    df = model.compressed_.summary()
    df.to_csv(out, sep="\t", float_format="%.4g")
    refphase.logger.info(f"Window summary written to {out}")
