import json
from harness import stderr, client

def _role_path(name, principal):
    return f'/{principal}/{name}-path/'

def _roles(name, principal):
    paginator = client('iam').get_paginator('list_roles')
    return [role
            for page in paginator.paginate(PathPrefix=_role_path(name, principal))
            for role in page['Roles']]

def ensure_role(name, principal='lambda', preview=False):
    stderr('\nensure role:')
    roles = _roles(name, principal)
    if 0 == len(roles):
        if preview:
            stderr(' preview:', name)
            return None
        stderr('', name)
        policy = {'Version': '2012-10-17',
                  'Statement': [{'Effect': 'Allow',
                                 'Principal': {'Service': f'{principal}.amazonaws.com'},
                                 'Action': 'sts:AssumeRole'}]}
        return client('iam').create_role(Path=_role_path(name, principal),
                                          RoleName=name,
                                          AssumeRolePolicyDocument=json.dumps(policy))['Role']['Arn']
    elif 1 == len(roles):
        stderr('', name)
        return roles[0]['Arn']
    else:
        assert False, f'more than 1 role under path: {_role_path(name, principal)} {[role["Arn"] for role in roles]}'

def rm_role(name, principal='lambda'):
    for role in _roles(name, principal):
        client('iam').delete_role(RoleName=role['RoleName'])
        stderr('deleted role:', role['RoleName'])
