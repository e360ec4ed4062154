import argh
import json
import sys
import harness
import harness.deploy
import harness.lamda
from harness import stderr

@argh.arg('handler', help='module.function of the entry point')
@argh.arg('--closure', help='include every module the handler imports')
def build(handler, *, output='lambda.zip', closure=False):
    """zip a handler for deployment"""
    with harness.setup(exit_on_error=True):
        archive = harness.deploy.build(handler, closure)
        archive.write(output)
        return output

@argh.arg('handler', help='module.function of the entry point')
@argh.arg('--name', help='function name, defaults to the handler module name')
@argh.arg('--closure', help='include every module the handler imports')
@argh.arg('--preview', help='only show what would happen')
def deploy(handler, *, name=None, bucket=harness.deploy.default_bucket, key=harness.deploy.default_key, closure=False, preview=False):
    """zip a handler, upload it to s3 and register it as a lambda function"""
    with harness.setup(exit_on_error=True):
        archive = harness.deploy.build(handler, closure)
        return harness.deploy.deploy(archive, handler, name=name, bucket=bucket, key=key, preview=preview)

@argh.arg('--payload', help='json text to send')
def invoke(name, *, payload='{}'):
    """invoke a lambda function synchronously"""
    with harness.setup(exit_on_error=True):
        resp = harness.lamda.invoke(name, payload)
        stderr('status:', resp['StatusCode'])
        if resp.get('FunctionError'):
            stderr('error:', resp['FunctionError'])
            sys.exit(1)
        return resp['Payload']

@argh.arg('handler', help='module.function of the entry point')
@argh.arg('--payload', help='json text to send')
@argh.arg('--closure', help='include every module the handler imports')
def invoke_local(handler, *, payload='{}', closure=False):
    """zip a handler and run it from the zip in a fresh interpreter"""
    with harness.setup(exit_on_error=True):
        archive = harness.deploy.build(handler, closure)
        resp = harness.lamda.invoke_local(archive.to_bytes(), handler, payload)
        if resp.get('FunctionError'):
            stderr('error:', json.loads(resp['Payload'])['errorMessage'])
            sys.exit(1)
        return resp['Payload']

@argh.arg('--preview', help='only show what would happen')
def rm(name, *, bucket=harness.deploy.default_bucket, preview=False):
    """delete a lambda function, its role and its bucket"""
    with harness.setup(exit_on_error=True):
        harness.deploy.rm(name, bucket, preview=preview)

def main():
    argh.dispatch_commands([build, deploy, invoke, invoke_local, rm])

if __name__ == '__main__':
    main()
