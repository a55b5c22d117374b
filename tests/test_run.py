import os
from unittest import mock

import pytest
import requests

from errors import FetchError
from github_client import GitHubApiError, client_module
from github_responses import ENVIRON, make_client_mock, make_injector, pr_json, run_json, suite_json
from run import Runner, main, run_action


def test_run_end_to_end():
    """
    Two PRs target `main`.
    The first has one GitHub Actions check suite with one running workflow run.
    The second has no GitHub Actions check suites.
    """
    client = make_client_mock()
    client.list_pull_requests.return_value = [pr_json(1, 'feat-1'), pr_json(2, 'feat-2')]
    client.list_check_suites_for_ref.side_effect = lambda owner, repo, ref: {
        'feat-1': [suite_json(11)],
        'feat-2': [suite_json(22, app_name='Other CI', app_slug='other-ci')],
    }[ref]
    client.list_workflow_runs.return_value = [run_json(101), run_json(102, 'success')]
    runner = make_injector(client).get(Runner)

    assert runner.run('octo-org', 'octo-repo', 'main') == 2

    client.list_workflow_runs.assert_called_once_with('octo-org', 'octo-repo', 11)
    client.cancel_workflow_run.assert_called_once_with('octo-org', 'octo-repo', 101)


def test_run_from_config():
    client = make_client_mock()
    client.list_pull_requests.return_value = []
    runner = make_injector(client).get(Runner)

    assert runner.run_from_config() == 0

    client.list_pull_requests.assert_called_once_with('octo-org', 'octo-repo', state='open', base='main')


def test_run_pr_failure_does_not_stop_other_prs():
    """
    The count is the number of PRs considered, so a PR whose check suites could not be fetched is still counted.
    """
    client = make_client_mock()
    client.list_pull_requests.return_value = [pr_json(1, 'feat-1'), pr_json(2, 'feat-2'), pr_json(3, 'feat-3')]

    def list_check_suites_for_ref(owner, repo, ref):
        if ref == 'feat-2':
            raise GitHubApiError(502, "Bad Gateway", 'GET', 'https://api.github.com')
        return [suite_json(int(ref[-1]))]

    client.list_check_suites_for_ref.side_effect = list_check_suites_for_ref
    client.list_workflow_runs.side_effect = lambda owner, repo, check_suite_id: [run_json(check_suite_id * 100)]
    runner = make_injector(client).get(Runner)
    runner.logger = mock.MagicMock()

    assert runner.run('octo-org', 'octo-repo', 'main') == 3

    assert client.cancel_workflow_run.call_args_list == [
        mock.call('octo-org', 'octo-repo', 100),
        mock.call('octo-org', 'octo-repo', 300),
    ]
    runner.logger.exception.assert_not_called()
    runner.logger.error.assert_called_once_with("Error processing PR #%d with head ref %s: %s", 2, 'feat-2', mock.ANY)
    assert str(runner.logger.error.call_args.args[3]) == "Failed to fetch check suites: Bad Gateway"
    runner.logger.debug.assert_called_with("Stack trace:", exc_info=True)


def test_run_suite_failure_does_not_stop_sibling_suites():
    client = make_client_mock()
    client.list_pull_requests.return_value = [pr_json(1, 'feat-1')]
    client.list_check_suites_for_ref.return_value = [suite_json(11), suite_json(12), suite_json(13)]

    def list_workflow_runs(owner, repo, check_suite_id):
        if check_suite_id == 12:
            raise GitHubApiError(500, "Server Error", 'GET', 'https://api.github.com')
        return [run_json(check_suite_id * 10), run_json(check_suite_id * 10 + 1)]

    client.list_workflow_runs.side_effect = list_workflow_runs
    runner = make_injector(client).get(Runner)
    runner.logger = mock.MagicMock()

    assert runner.run('octo-org', 'octo-repo', 'main') == 1

    assert client.cancel_workflow_run.call_args_list == [
        mock.call('octo-org', 'octo-repo', 110),
        mock.call('octo-org', 'octo-repo', 111),
        mock.call('octo-org', 'octo-repo', 130),
        mock.call('octo-org', 'octo-repo', 131),
    ]
    runner.logger.exception.assert_not_called()
    runner.logger.error.assert_called_once_with("Error processing check suite %s for PR #%d: %s", 12, 1, mock.ANY)
    assert str(runner.logger.error.call_args.args[3]) == "Failed to fetch workflow runs: Server Error"


def test_run_cancel_failure_does_not_stop_sibling_runs():
    client = make_client_mock()
    client.list_pull_requests.return_value = [pr_json(1, 'feat-1')]
    client.list_check_suites_for_ref.return_value = [suite_json(11)]
    client.list_workflow_runs.return_value = [run_json(101), run_json(102), run_json(103)]
    client.cancel_workflow_run.side_effect = [None, GitHubApiError(409, "Conflict", 'POST', 'https://api.github.com'), None]
    runner = make_injector(client).get(Runner)
    runner.logger = mock.MagicMock()

    assert runner.run('octo-org', 'octo-repo', 'main') == 1

    assert client.cancel_workflow_run.call_count == 3
    runner.logger.exception.assert_not_called()
    runner.logger.error.assert_not_called()


def test_run_pr_listing_failure_aborts():
    client = make_client_mock()
    client.list_pull_requests.side_effect = GitHubApiError(401, "Bad credentials", 'GET', 'https://api.github.com')
    runner = make_injector(client).get(Runner)

    with pytest.raises(FetchError, match="Bad credentials"):
        runner.run('octo-org', 'octo-repo', 'main')

    client.list_check_suites_for_ref.assert_not_called()


def test_run_shared_head_ref():
    """
    Check suites are resolved by head ref, so two PRs from the same branch both see the same runs.
    """
    client = make_client_mock()
    client.list_pull_requests.return_value = [pr_json(1, 'shared'), pr_json(2, 'shared')]
    client.list_check_suites_for_ref.return_value = [suite_json(11)]
    client.list_workflow_runs.return_value = [run_json(101)]
    runner = make_injector(client).get(Runner)

    assert runner.run('octo-org', 'octo-repo', 'main') == 2

    assert client.list_check_suites_for_ref.call_args_list == [
        mock.call('octo-org', 'octo-repo', 'shared'),
        mock.call('octo-org', 'octo-repo', 'shared'),
    ]
    assert client.cancel_workflow_run.call_count == 2


@mock.patch.object(requests.Session, 'request')
def test_run_action_invalid_repository(mock_request):
    """
    An invalid repository fails before any request is sent to GitHub.
    """
    with mock.patch.object(client_module, 'GitHubClient') as mock_client_class:
        exit_code = run_action({**ENVIRON, 'INPUT_REPOSITORY': 'myorg'})

    assert exit_code == 1
    mock_client_class.assert_not_called()
    mock_request.assert_not_called()


def test_run_action_writes_output(tmp_path):
    output_path = tmp_path / 'github_output'
    client = make_client_mock()
    client.list_pull_requests.return_value = [pr_json(1, 'feat-1'), pr_json(2, 'feat-2', draft=True)]
    client.list_check_suites_for_ref.return_value = []

    with mock.patch.object(client_module, 'GitHubClient', return_value=client) as mock_client_class:
        exit_code = run_action({**ENVIRON, 'GITHUB_OUTPUT': str(output_path)})

    assert exit_code == 0
    assert mock_client_class.call_args.kwargs['token'] == 'ghs_test_token'
    assert mock_client_class.call_args.kwargs['base_url'] == 'https://api.github.com'
    assert output_path.read_text(encoding='utf-8') == f"prs_processed=1{os.linesep}"


def test_run_action_failure(tmp_path):
    output_path = tmp_path / 'github_output'
    client = make_client_mock()
    client.list_pull_requests.side_effect = GitHubApiError(404, "Not Found", 'GET', 'https://api.github.com')

    with mock.patch.object(client_module, 'GitHubClient', return_value=client):
        exit_code = run_action({**ENVIRON, 'GITHUB_OUTPUT': str(output_path)})

    assert exit_code == 1
    assert not output_path.exists()


def test_main_exits_with_code():
    with mock.patch.dict(os.environ, {'INPUT_BRANCH': 'main'}, clear=True):
        with pytest.raises(SystemExit) as exc_info:
            main()
    assert exc_info.value.code == 1
