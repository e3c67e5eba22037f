"""
Test suites package.

Layout:
  - ui_testing/framework: wait engine, readiness gate, retry, visual checks
  - ui_testing/pages: SauceDemo page objects
  - ui_testing/tests: live browser tests (run with --run-ui)
  - unit: offline framework tests
  - config/config.yaml: shipped configuration

Credentials used by the suites are the public SauceDemo demo accounts.
"""
