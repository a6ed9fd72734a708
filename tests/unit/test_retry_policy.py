# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from apinet.errors import ConnectTimeoutException, NetworkConnectionException, ParseException, SocketTimeoutException
from apinet.http.models import HttpResponse
from apinet.http.retry import RetryDecision, RetryPolicy, default_should_retry
from apinet.models.result import BusinessError, HttpError, NetworkError, ParseError, UnknownError

NETWORK = NetworkError(cause=NetworkConnectionException("refused"))


def test_linear_backoff_delays():
    policy = RetryPolicy(max_retries=3, retry_delay=0.5)
    decisions = [policy.decide(attempt, NETWORK) for attempt in range(4)]
    assert decisions[:3] == [
        RetryDecision(retry=True, delay=0.5),
        RetryDecision(retry=True, delay=1.0),
        RetryDecision(retry=True, delay=1.5),
    ]
    assert decisions[3].retry is False


def test_max_retries_always_wins_over_predicate():
    policy = RetryPolicy(max_retries=2, retry_delay=0.0, should_retry=lambda prior, error: True)
    assert policy.decide(1, NETWORK).retry is True
    assert policy.decide(2, NETWORK).retry is False
    assert policy.decide(7, NETWORK).retry is False


def test_no_retry_means_single_attempt():
    assert RetryPolicy.NO_RETRY.max_attempts == 1
    assert RetryPolicy.NO_RETRY.decide(0, NETWORK).retry is False


@pytest.mark.parametrize(
    "error",
    [
        NetworkError(cause=NetworkConnectionException("reset")),
        NetworkError(cause=ConnectTimeoutException()),
        NetworkError(cause=SocketTimeoutException()),
        NetworkError(cause=OSError("io")),
    ],
)
def test_default_predicate_retries_connectivity_failures(error):
    assert default_should_retry(None, error) is True
    assert RetryPolicy.DEFAULT.decide(0, error).retry is True


@pytest.mark.parametrize(
    "error",
    [
        HttpError(status_code=500, message="Internal Server Error"),
        HttpError(status_code=503, message="Service Unavailable"),
        BusinessError(code=500, message="server busy"),
        ParseError(cause=ParseException("bad")),
        UnknownError(cause=RuntimeError("bug")),
    ],
)
def test_default_predicate_never_retries_other_failures(error):
    assert default_should_retry(None, error) is False
    assert RetryPolicy.DEFAULT.decide(0, error) == RetryDecision(retry=False)


def test_predicate_receives_prior_response():
    seen = []

    def predicate(prior, error):
        seen.append((prior, error))
        return prior is not None and prior.status_code == 503

    policy = RetryPolicy(max_retries=1, retry_delay=2.0, should_retry=predicate)
    prior = HttpResponse(status_code=503, reason="Service Unavailable")
    error = HttpError(status_code=503, message="Service Unavailable")

    assert policy.decide(0, error, prior) == RetryDecision(retry=True, delay=2.0)
    assert seen == [(prior, error)]


def test_presets():
    assert RetryPolicy.DEFAULT == RetryPolicy(max_retries=3, retry_delay=1.0)
    assert RetryPolicy.NETWORK_ONLY.should_retry is default_should_retry
    aggressive = RetryPolicy.AGGRESSIVE
    assert (aggressive.max_retries, aggressive.retry_delay) == (5, 0.5)
    assert aggressive.decide(0, HttpError(status_code=500, message="x")).retry is True


@pytest.mark.parametrize("kwargs", [{"max_retries": -1}, {"retry_delay": -0.1}])
def test_policy_validation(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)
