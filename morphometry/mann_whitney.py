"""Mann-Whitney U rank test with tie correction."""
from __future__ import annotations

import logging
import math
from typing import Optional

from .data_models import GroupSample, MannWhitneyResult
from .special import normal_cdf

logger = logging.getLogger(__name__)


def two_sample_test(a: GroupSample, b: GroupSample, metric: str = "", pair_label: str = "") -> Optional[MannWhitneyResult]:
    n1, n2 = len(a), len(b)
    if n1 < 1 or n2 < 1:
        return None

    # sorted() is stable, so equal values keep their input order.
    combined = sorted([(float(v), 0) for v in a] + [(float(v), 1) for v in b], key=lambda item: item[0])
    n_total = n1 + n2

    rank_sums = [0.0, 0.0]
    tie_correction = 0.0
    i = 0
    while i < n_total:
        j = i + 1
        while j < n_total and combined[j][0] == combined[i][0]:
            j += 1
        # 1-based positions i+1 .. j share the average rank.
        avg_rank = (i + 1 + j) / 2.0
        ties = j - i
        if ties > 1:
            tie_correction += ties ** 3 - ties
        for _, group in combined[i:j]:
            rank_sums[group] += avg_rank
        i = j

    u1 = n1 * n2 + n1 * (n1 + 1) / 2.0 - rank_sums[0]
    u2 = n1 * n2 + n2 * (n2 + 1) / 2.0 - rank_sums[1]
    u = min(u1, u2)

    mean_u = n1 * n2 / 2.0
    var_u = n1 * n2 * (n_total + 1) / 12.0
    if tie_correction > 0:
        var_u -= n1 * n2 * tie_correction / (12.0 * n_total * (n_total - 1))
    if var_u <= 0:
        logger.debug("Mann-Whitney for %r: all values tied", metric)
        return MannWhitneyResult(pair_label=pair_label, metric=metric, u=u, p=1.0)

    z = (u - mean_u) / math.sqrt(var_u)
    p = 2.0 * (1.0 - normal_cdf(abs(z)))
    return MannWhitneyResult(pair_label=pair_label, metric=metric, u=u, p=min(1.0, max(0.0, p)))
