"""One-way analysis of variance across datasets."""
from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from .data_models import AnovaResult, GroupSample
from .special import f_upper_tail

logger = logging.getLogger(__name__)


def one_way_anova(groups: Sequence[GroupSample], metric: str = "") -> Optional[AnovaResult]:
    """F test for equal means; None when there are fewer than 2 groups or N <= k."""
    samples = [list(map(float, g)) for g in groups if len(g) > 0]
    k = len(samples)
    n_total = sum(len(g) for g in samples)
    if k < 2 or n_total <= k:
        logger.debug("ANOVA for %r skipped: k=%d, N=%d", metric, k, n_total)
        return None

    grand_mean = math.fsum(math.fsum(g) for g in samples) / n_total
    group_means = [math.fsum(g) / len(g) for g in samples]

    ss_between = math.fsum(len(g) * (m - grand_mean) ** 2 for g, m in zip(samples, group_means))
    ss_within = math.fsum((x - m) ** 2 for g, m in zip(samples, group_means) for x in g)

    df_between = k - 1
    df_within = n_total - k
    if df_within <= 0 or ss_within == 0:
        # Zero spread inside every group: perfect separation.
        return AnovaResult(metric=metric, f=math.inf, p=0.0)

    f = (ss_between / df_between) / (ss_within / df_within)
    return AnovaResult(metric=metric, f=f, p=f_upper_tail(f, df_between, df_within))
