# registry defaults
default_domain = "hub.docker.com"
default_tag = "latest"
default_platform = "linux/amd64"

# extraction defaults
default_output_dir = "./output"
default_layer_count = 1
download_chunk_size = 1024 * 1024

# auth
placeholder_token = "token"
basic_user_env = "BASIC_USER"
basic_password_env = "BASIC_PASSWORD"

# media types
oci_index_media_type = "application/vnd.oci.image.index.v1+json"
oci_manifest_media_type = "application/vnd.oci.image.manifest.v1+json"
docker_manifest_media_type = "application/vnd.docker.distribution.manifest.v2+json"

manifest_media_types = (oci_manifest_media_type, docker_manifest_media_type)
index_media_types = (oci_index_media_type,)

# order matters, registries honour the first type they can serve
accepted_manifest_media_types = [
    oci_index_media_type,
    oci_manifest_media_type,
    docker_manifest_media_type,
]
